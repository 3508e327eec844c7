"""
resolver.py
-----------

Maps file types to extensions and back.

Every FileType that a signature rule can produce has one canonical
extension (the first entry below) and optional aliases. Aliases are
accepted as "already correct" and are never renamed.
"""

from .signatures import DEFAULT_TABLE, FileType


# ------------------------------------------------------------
# Extension table
# ------------------------------------------------------------
# Format:
#   FileType: (canonical, alias, alias, ...)
EXTENSIONS = {
    FileType.JPEG: ("jpg", "jpeg", "jpe", "jfif"),
    FileType.PNG: ("png",),
    FileType.GIF: ("gif",),
    FileType.BMP: ("bmp", "dib"),
    FileType.TIFF: ("tif", "tiff"),
    FileType.ICO: ("ico",),
    FileType.JP2: ("jp2", "jpx", "j2k"),
    FileType.WEBP: ("webp",),
    FileType.AVIF: ("avif",),
    FileType.HEIC: ("heic", "heif", "hif"),

    FileType.PDF: ("pdf",),
    # Office, Java, Android and Python packages are ZIP containers too
    FileType.ZIP: (
        "zip", "docx", "xlsx", "pptx", "odt", "ods", "odp",
        "jar", "apk", "whl", "xpi", "cbz", "kmz", "vsix", "nupkg",
    ),
    FileType.EPUB: ("epub",),
    FileType.RAR: ("rar", "cbr"),
    FileType.SEVEN_ZIP: ("7z",),
    FileType.BZ2: ("bz2", "tbz2", "tbz"),
    FileType.XZ: ("xz", "txz"),
    FileType.GZIP: ("gz", "tgz", "gzip"),

    FileType.MP3: ("mp3",),
    FileType.AAC: ("aac",),
    FileType.FLAC: ("flac",),
    FileType.OGG: ("ogg", "oga", "ogv", "ogx", "opus", "spx"),
    FileType.WAV: ("wav", "wave"),
    FileType.AIFF: ("aiff", "aif", "aifc"),

    FileType.MKV: ("mkv", "webm", "mka", "mks", "mk3d"),
    FileType.MP4: ("mp4", "m4a", "m4b", "m4p", "3gp"),
    FileType.M4V: ("m4v",),
    FileType.MOV: ("mov", "qt"),
    FileType.AVI: ("avi",),
    FileType.FLV: ("flv",),
    FileType.WMV: ("wmv", "asf", "wma"),
}


def _build_claims(extensions):
    claims = {}
    for file_type, exts in extensions.items():
        if not exts:
            raise ValueError(f"{file_type.name} has no extensions")
        for ext in exts:
            if ext in claims:
                raise ValueError(
                    f"Extension {ext!r} claimed by {claims[ext].name} and {file_type.name}"
                )
            claims[ext] = file_type
    return claims


_CLAIMS = _build_claims(EXTENSIONS)


def normalize_extension(ext):
    """'.JPG' -> 'jpg'; None -> ''."""
    if not ext:
        return ""
    return ext.lstrip(".").lower()


def canonical_extension(file_type):
    """Preferred extension for file_type ('' for UNKNOWN)."""
    if file_type is FileType.UNKNOWN:
        return ""
    return EXTENSIONS[file_type][0]


def extensions_of(file_type):
    return EXTENSIONS.get(file_type, ())


def claimed_type(ext):
    """FileType a file extension claims, FileType.UNKNOWN if none."""
    return _CLAIMS.get(normalize_extension(ext), FileType.UNKNOWN)


def is_alias(ext, file_type):
    """True if ext is the canonical extension of file_type or one of its aliases."""
    return normalize_extension(ext) in extensions_of(file_type)


def check_coverage(table=DEFAULT_TABLE):
    """Raise ValueError if a rule produces a type without extensions."""
    missing = sorted({r.file_type.name for r in table if r.file_type not in EXTENSIONS})
    if missing:
        raise ValueError(f"No extensions registered for: {', '.join(missing)}")


check_coverage()
