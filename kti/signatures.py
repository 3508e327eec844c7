"""
signatures.py
-------------

Magic-byte signature table.

Defines:
- FileType: every format kti can recognize (plus UNKNOWN)
- SignatureRule: one byte pattern at an offset, tagged with a FileType
- SIGNATURE_LENGTH: how many bytes are read from each file
- DEFAULT_TABLE: the immutable rule table used by the matcher

Pattern notation:
    Patterns are either literal bytes (b"fLaC") or hex strings where
    "??" is a wildcard byte ("52 49 46 46 ?? ?? ?? ?? 57 41 56 45").

Ordering:
    Rules are kept in a total order: higher weight first, then more
    literal (non-wildcard) bytes, then registration order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

# How many bytes to read from each file for detection.
# Every rule must fit inside this window (offset + pattern length).
SIGNATURE_LENGTH = 64

WILDCARD = None


class FileType(Enum):
    """Detectable formats. The value is a human readable name."""

    UNKNOWN = "unknown"

    # Images
    JPEG = "JPEG image"
    PNG = "PNG image"
    GIF = "GIF image"
    BMP = "BMP image"
    TIFF = "TIFF image"
    ICO = "Windows icon"
    JP2 = "JPEG 2000 image"
    WEBP = "WebP image"
    AVIF = "AVIF image"
    HEIC = "HEIF/HEIC image"

    # Documents and archives
    PDF = "PDF document"
    ZIP = "ZIP archive"
    EPUB = "EPUB e-book"
    RAR = "RAR archive"
    SEVEN_ZIP = "7-Zip archive"
    BZ2 = "bzip2 stream"
    XZ = "xz stream"
    GZIP = "gzip stream"

    # Audio
    MP3 = "MP3 audio"
    AAC = "AAC (ADTS) audio"
    FLAC = "FLAC audio"
    OGG = "Ogg container"
    WAV = "WAVE audio"
    AIFF = "AIFF audio"

    # Video
    MKV = "Matroska/WebM video"
    MP4 = "MPEG-4 video"
    M4V = "M4V video"
    MOV = "QuickTime movie"
    AVI = "AVI video"
    FLV = "Flash video"
    WMV = "Windows Media (ASF)"


# ------------------------------------------------------------
# Rule model
# ------------------------------------------------------------
@dataclass(frozen=True)
class SignatureRule:
    pattern: Tuple[Optional[int], ...]
    offset: int
    file_type: FileType
    weight: int = 0
    index: int = 0
    literal_count: int = field(init=False)

    def __post_init__(self):
        # frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(
            self, "literal_count", sum(1 for b in self.pattern if b is not WILDCARD)
        )

    @property
    def span(self):
        """Number of leading file bytes this rule needs."""
        return self.offset + len(self.pattern)

    def sort_key(self):
        return (-self.weight, -self.literal_count, self.index)

    def matches(self, buf):
        """True if every literal byte of the pattern is present in buf."""
        if self.span > len(buf):
            return False
        for i, expected in enumerate(self.pattern):
            if expected is not WILDCARD and buf[self.offset + i] != expected:
                return False
        return True

    def describe(self):
        hexed = " ".join("??" if b is WILDCARD else f"{b:02X}" for b in self.pattern)
        return f"{self.file_type.name}@{self.offset}: {hexed}"


def parse_pattern(pattern: Union[bytes, str]) -> Tuple[Optional[int], ...]:
    """
    Convert a rule pattern into a tuple of byte values / wildcards.

        parse_pattern(b"BM")          -> (0x42, 0x4D)
        parse_pattern("FF D8 ?? E0")  -> (0xFF, 0xD8, None, 0xE0)
    """
    if isinstance(pattern, (bytes, bytearray)):
        return tuple(pattern)

    out = []
    for token in pattern.split():
        if token == "??":
            out.append(WILDCARD)
        else:
            if len(token) != 2:
                raise ValueError(f"Bad hex token {token!r} in pattern {pattern!r}")
            out.append(int(token, 16))
    return tuple(out)


def build_table(
    specs: Iterable[tuple],
    max_length: int = SIGNATURE_LENGTH,
) -> Tuple[SignatureRule, ...]:
    """
    Build an ordered, immutable rule table.

    Each entry is (pattern, offset, file_type) or
    (pattern, offset, file_type, weight).
    """
    rules = []
    for index, spec in enumerate(specs):
        pattern, offset, file_type = spec[:3]
        weight = spec[3] if len(spec) > 3 else 0

        parsed = parse_pattern(pattern)
        if not parsed:
            raise ValueError(f"Empty pattern for {file_type}")
        if all(b is WILDCARD for b in parsed):
            raise ValueError(f"Pattern for {file_type} has no literal bytes")
        if offset < 0 or offset + len(parsed) > max_length:
            raise ValueError(
                f"Rule for {file_type} needs {offset + len(parsed)} bytes, "
                f"window is {max_length}"
            )
        if file_type is FileType.UNKNOWN:
            raise ValueError("UNKNOWN cannot be the target of a rule")

        rules.append(SignatureRule(parsed, offset, file_type, weight, index))

    rules.sort(key=SignatureRule.sort_key)
    return tuple(rules)


def lookup_candidates(
    prefix: bytes,
    table: Optional[Sequence[SignatureRule]] = None,
) -> List[Tuple[SignatureRule, int]]:
    """
    Return every rule matching prefix as (rule, match_length), best first.

    match_length is the number of leading bytes the rule covers.
    An empty prefix matches nothing.
    """
    if table is None:
        table = DEFAULT_TABLE
    if not prefix:
        return []
    return [(rule, rule.span) for rule in table if rule.matches(prefix)]


# ------------------------------------------------------------
# Signature specs
# ------------------------------------------------------------
# Format:
#   (pattern, offset, file_type[, weight])
SIGNATURE_SPECS = [

    # ============================
    # IMAGE FORMATS
    # ============================
    (b"GIF87a", 0, FileType.GIF),
    (b"GIF89a", 0, FileType.GIF),
    (b"\x89PNG\r\n\x1a\n", 0, FileType.PNG),
    (b"\xFF\xD8\xFF", 0, FileType.JPEG),
    (b"BM", 0, FileType.BMP),
    (b"II*\x00", 0, FileType.TIFF),
    (b"MM\x00*", 0, FileType.TIFF),
    (b"\x00\x00\x00\x0CjP  \r\n\x87\n", 0, FileType.JP2),
    (b"\x00\x00\x01\x00", 0, FileType.ICO),
    ("52 49 46 46 ?? ?? ?? ?? 57 45 42 50", 0, FileType.WEBP),

    # ============================
    # DOCUMENTS AND ARCHIVES
    # ============================
    (b"%PDF-", 0, FileType.PDF),
    (b"PK\x03\x04", 0, FileType.ZIP),
    (b"PK\x05\x06", 0, FileType.ZIP),
    # EPUB: first member is an uncompressed "mimetype" file
    ("50 4B 03 04" + " ??" * 26 + " " + b"mimetypeapplication/epub+zip".hex(" "),
     0, FileType.EPUB, 10),
    (b"Rar!\x1A\x07\x00", 0, FileType.RAR),
    (b"Rar!\x1A\x07\x01\x00", 0, FileType.RAR),
    (b"7z\xBC\xAF\x27\x1C", 0, FileType.SEVEN_ZIP),
    (b"BZh", 0, FileType.BZ2),
    (b"\xFD7zXZ\x00", 0, FileType.XZ),
    (b"\x1F\x8B\x08", 0, FileType.GZIP),

    # ============================
    # AUDIO FORMATS
    # ============================
    (b"ID3", 0, FileType.MP3),
    (b"\xFF\xFB", 0, FileType.MP3),
    (b"\xFF\xF3", 0, FileType.MP3),
    (b"\xFF\xF2", 0, FileType.MP3),
    (b"\xFF\xF1", 0, FileType.AAC),
    (b"\xFF\xF9", 0, FileType.AAC),
    (b"fLaC", 0, FileType.FLAC),
    (b"OggS", 0, FileType.OGG),
    ("52 49 46 46 ?? ?? ?? ?? 57 41 56 45", 0, FileType.WAV),
    ("46 4F 52 4D ?? ?? ?? ?? 41 49 46 46", 0, FileType.AIFF),
    ("46 4F 52 4D ?? ?? ?? ?? 41 49 46 43", 0, FileType.AIFF),

    # ============================
    # VIDEO FORMATS
    # ============================
    (b"\x1A\x45\xDF\xA3", 0, FileType.MKV),
    ("52 49 46 46 ?? ?? ?? ?? 41 56 49 20", 0, FileType.AVI),
    (b"FLV\x01", 0, FileType.FLV),
    (b"\x30\x26\xB2\x75\x8E\x66\xCF\x11", 0, FileType.WMV),

    # ISO BMFF: 'ftyp' box at offset 4, major brand at offset 8
    (b"ftypqt  ", 4, FileType.MOV),
    (b"ftypavc1", 4, FileType.MP4),
    (b"ftypisom", 4, FileType.MP4),
    (b"ftypiso2", 4, FileType.MP4),
    (b"ftypmmp4", 4, FileType.MP4),
    (b"ftypmp41", 4, FileType.MP4),
    (b"ftypmp42", 4, FileType.MP4),
    (b"ftypmp71", 4, FileType.MP4),
    (b"ftypmsnv", 4, FileType.MP4),
    (b"ftypM4V ", 4, FileType.M4V),
    (b"ftypavif", 4, FileType.AVIF),
    (b"ftypheic", 4, FileType.HEIC),
    (b"ftypheix", 4, FileType.HEIC),
    (b"ftyphevc", 4, FileType.HEIC),
    (b"ftyphevx", 4, FileType.HEIC),
    (b"ftypmif1", 4, FileType.HEIC),
]


DEFAULT_TABLE = build_table(SIGNATURE_SPECS)
