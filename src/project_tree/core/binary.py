from pathlib import PurePath
from typing import NamedTuple

SNIFF_LENGTH = 8192

BINARY_PLACEHOLDER = "[Binary file - content not displayable]"

_BINARY_EXTENSIONS = frozenset(
    {
        # documents
        "pdf",
        "doc",
        "docx",
        "xls",
        "xlsx",
        "ppt",
        "pptx",
        "odt",
        "ods",
        "odp",
        # images
        "jpg",
        "jpeg",
        "png",
        "gif",
        "bmp",
        "tiff",
        "tif",
        "svg",
        "ico",
        "webp",
        # audio
        "mp3",
        "wav",
        "flac",
        "ogg",
        "aac",
        "m4a",
        "wma",
        # video
        "mp4",
        "avi",
        "mov",
        "wmv",
        "flv",
        "webm",
        "mkv",
        "m4v",
        # archives
        "zip",
        "rar",
        "7z",
        "tar",
        "gz",
        "bz2",
        "xz",
        # executables
        "exe",
        "dll",
        "so",
        "dylib",
        "bin",
        # raw data
        "dat",
        "db",
        "sqlite",
        "sqlite3",
    }
)

_TYPE_DESCRIPTIONS = {
    "pdf": "PDF Document",
    "doc": "Word Document",
    "docx": "Word Document",
    "xls": "Excel Spreadsheet",
    "xlsx": "Excel Spreadsheet",
    "ppt": "PowerPoint Presentation",
    "pptx": "PowerPoint Presentation",
    "py": "Python Script",
    "ipynb": "Jupyter Notebook",
    "js": "JavaScript File",
    "html": "HTML File",
    "css": "CSS Stylesheet",
    "json": "JSON Data",
    "xml": "XML Data",
    "txt": "Text File",
    "md": "Markdown File",
    "csv": "CSV Data",
    "jpg": "JPEG Image",
    "jpeg": "JPEG Image",
    "png": "PNG Image",
    "gif": "GIF Image",
    "svg": "SVG Image",
    "zip": "ZIP Archive",
    "rar": "RAR Archive",
    "7z": "7-Zip Archive",
    "mp3": "MP3 Audio",
    "mp4": "MP4 Video",
}


class Classification(NamedTuple):
    is_binary: bool
    type_label: str


def get_extension(path: str | PurePath) -> str | None:
    """Return the lower-cased extension of ``path`` without the dot, if any."""
    suffix = PurePath(path).suffix
    if not suffix or suffix == ".":
        return None
    return suffix[1:].lower()


def is_binary_extension(path: str | PurePath) -> bool:
    extension = get_extension(path)
    return extension is not None and extension in _BINARY_EXTENSIONS


def is_content_binary(content: bytes) -> bool:
    """Null-byte heuristic over the first ``SNIFF_LENGTH`` bytes."""
    return b"\x00" in content[:SNIFF_LENGTH]


def is_decodable_text(content: bytes) -> bool:
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def describe_file_type(path: str | PurePath) -> str:
    extension = get_extension(path)
    if extension is None:
        return "Unknown File"
    return _TYPE_DESCRIPTIONS.get(extension, f"{extension.upper()} File")


def classify(path: str | PurePath, sample: bytes | None = None) -> Classification:
    """Decide whether ``path`` is binary and give it a human-readable label.

    Known binary extensions win outright. Otherwise the optional byte
    ``sample`` is consulted: a zero byte in its prefix or a failed UTF-8
    decode marks the content binary. Without a sample the extension verdict
    stands.
    """
    label = describe_file_type(path)
    if is_binary_extension(path):
        return Classification(True, label)
    if sample is None:
        return Classification(False, label)
    return Classification(is_content_binary(sample) or not is_decodable_text(sample), label)
