"""
Built-in ignore patterns, excluded directory names, and the extension tables
used for text/binary classification.

Ignore patterns use the flat glob syntax of `normalize_pattern()`. Directory
patterns end with `/`.
"""

from __future__ import annotations

# Applied as the first ignore source unless the caller replaces them.
DEFAULT_IGNORE_PATTERNS: list[str] = [
    # Lock files
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
    "poetry.lock",
    "uv.lock",
    "Cargo.lock",
    # Tool state
    ".git/",
    ".kodu/",
    # Build output and dependencies
    "node_modules/",
    "dist/",
    "coverage/",
    "*.egg-info/",
    # OS debris
    ".DS_Store",
    "Thumbs.db",
]

# Directory names pruned by name alone, at any depth, before any pattern is
# consulted.
DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset(
    {
        # Version control
        ".git",
        ".hg",
        ".svn",
        ".bzr",
        "_darcs",
        # Python
        ".venv",
        "venv",
        "__pycache__",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
        ".eggs",
        # Build output
        "build",
        "dist",
        "out",
        # JavaScript/Node
        "node_modules",
        "bower_components",
        ".next",
        ".nuxt",
        ".output",
        ".cache",
        ".parcel-cache",
        ".turbo",
        # IDE/Editor
        ".idea",
        ".vscode",
        ".vs",
        ".fleet",
        # Coverage
        "coverage",
        "htmlcov",
        ".nyc_output",
        # Other
        "vendor",
        "Pods",
        "target",
        ".terraform",
    }
)

# Extensions that are always text, even if sniffing would disagree.
TEXT_EXTENSIONS: frozenset[str] = frozenset(
    {
        # Docs
        ".md",
        ".mdx",
        ".markdown",
        ".rst",
        ".txt",
        ".adoc",
        # JavaScript/TypeScript
        ".js",
        ".jsx",
        ".mjs",
        ".cjs",
        ".ts",
        ".tsx",
        ".mts",
        ".cts",
        ".vue",
        ".svelte",
        # Other languages
        ".py",
        ".pyi",
        ".go",
        ".rs",
        ".java",
        ".kt",
        ".kts",
        ".scala",
        ".rb",
        ".php",
        ".c",
        ".h",
        ".cc",
        ".cpp",
        ".hpp",
        ".cs",
        ".swift",
        ".m",
        ".lua",
        ".dart",
        ".ex",
        ".exs",
        ".sql",
        ".graphql",
        ".proto",
        # Shell
        ".sh",
        ".bash",
        ".zsh",
        ".fish",
        ".ps1",
        ".bat",
        # Web
        ".html",
        ".htm",
        ".css",
        ".scss",
        ".sass",
        ".less",
        ".svg",
        # Data and config
        ".json",
        ".jsonc",
        ".json5",
        ".yaml",
        ".yml",
        ".toml",
        ".ini",
        ".cfg",
        ".conf",
        ".xml",
        ".csv",
        ".tsv",
        ".env",
        ".properties",
        ".lock",
    }
)

# Exact basenames that are text regardless of their (missing or odd) extension.
TEXT_FILENAMES: frozenset[str] = frozenset(
    {
        "Makefile",
        "Dockerfile",
        "Containerfile",
        "Procfile",
        "Gemfile",
        "Rakefile",
        "Jenkinsfile",
        "Vagrantfile",
        "LICENSE",
        "NOTICE",
        "AUTHORS",
        "CODEOWNERS",
        ".env.example",
        ".env.sample",
        ".gitignore",
        ".gitattributes",
        ".editorconfig",
        ".npmrc",
        ".nvmrc",
        ".prettierrc",
        ".eslintrc",
        ".dockerignore",
        ".koduignore",
    }
)

BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {
        # Images
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".bmp",
        ".ico",
        ".icns",
        ".webp",
        ".tif",
        ".tiff",
        ".psd",
        ".avif",
        ".heic",
        # Audio/video
        ".mp3",
        ".wav",
        ".ogg",
        ".flac",
        ".m4a",
        ".mp4",
        ".mov",
        ".avi",
        ".mkv",
        ".webm",
        # Archives
        ".zip",
        ".gz",
        ".tgz",
        ".bz2",
        ".xz",
        ".7z",
        ".rar",
        ".tar",
        ".jar",
        ".war",
        # Documents
        ".pdf",
        ".doc",
        ".docx",
        ".xls",
        ".xlsx",
        ".ppt",
        ".pptx",
        # Fonts
        ".ttf",
        ".otf",
        ".woff",
        ".woff2",
        ".eot",
        # Compiled and native
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".a",
        ".o",
        ".obj",
        ".lib",
        ".class",
        ".pyc",
        ".pyo",
        ".wasm",
        ".bin",
        # Data stores
        ".db",
        ".sqlite",
        ".sqlite3",
        ".parquet",
        ".npy",
        ".npz",
        ".pkl",
    }
)

# Sniffing reads this many bytes from the start of a file.
SNIFF_BYTES = 8192

# Magic numbers checked at offset 0 when sniffing. Only signatures with
# non-ASCII bytes, so a text file cannot start with one by accident.
BINARY_SIGNATURES: tuple[bytes, ...] = (
    b"\x89PNG",  # PNG
    b"\xff\xd8\xff",  # JPEG
    b"PK\x03\x04",  # ZIP, JAR, Office
    b"\x1f\x8b\x08",  # GZIP
    b"\x7fELF",  # ELF
    b"\xca\xfe\xba\xbe",  # Java class, Mach-O fat
    b"\x00asm",  # WebAssembly
)
