"""Call-site patterns whose string arguments are filesystem paths."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache


@dataclass(slots=True, frozen=True)
class PathCallPattern:
    """One recognizable path-taking callable.

    ``owners`` restricts the dotted qualifier (``np`` in ``np.load``); an empty
    tuple accepts any qualifier or none.
    """

    name: str
    owners: tuple[str, ...] = ()
    positional: bool = True
    keywords: tuple[str, ...] = ()


_PANDAS_KEYWORDS = ("filepath_or_buffer", "path", "path_or_buf", "io")
_NUMPY_OWNERS = ("np", "numpy")
_OS_OWNERS = ("os",)
_OS_PATH_OWNERS = ("os.path", "path", "osp")
_SHUTIL_OWNERS = ("shutil",)

DEFAULT_CALL_PATTERNS: tuple[PathCallPattern, ...] = (
    PathCallPattern("open", keywords=("file",)),
    PathCallPattern("Path"),
    PathCallPattern("PurePath"),
    PathCallPattern("PosixPath"),
    PathCallPattern("WindowsPath"),
    PathCallPattern("PurePosixPath"),
    PathCallPattern("PureWindowsPath"),
    PathCallPattern("read_csv", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_table", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_parquet", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_json", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_excel", keywords=("io",)),
    PathCallPattern("read_feather", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_pickle", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_hdf", keywords=("path_or_buf",)),
    PathCallPattern("read_fwf", keywords=_PANDAS_KEYWORDS),
    PathCallPattern("read_orc", keywords=("path",)),
    PathCallPattern("load", owners=_NUMPY_OWNERS, keywords=("file",)),
    PathCallPattern("loadtxt", owners=_NUMPY_OWNERS, keywords=("fname",)),
    PathCallPattern("genfromtxt", owners=_NUMPY_OWNERS, keywords=("fname",)),
    PathCallPattern("fromfile", owners=_NUMPY_OWNERS, keywords=("file",)),
    PathCallPattern("listdir", owners=_OS_OWNERS),
    PathCallPattern("scandir", owners=_OS_OWNERS),
    PathCallPattern("stat", owners=_OS_OWNERS),
    PathCallPattern("remove", owners=_OS_OWNERS),
    PathCallPattern("unlink", owners=_OS_OWNERS),
    PathCallPattern("mkdir", owners=_OS_OWNERS),
    PathCallPattern("makedirs", owners=_OS_OWNERS),
    PathCallPattern("chdir", owners=_OS_OWNERS),
    PathCallPattern("exists", owners=_OS_PATH_OWNERS),
    PathCallPattern("isfile", owners=_OS_PATH_OWNERS),
    PathCallPattern("isdir", owners=_OS_PATH_OWNERS),
    PathCallPattern("getsize", owners=_OS_PATH_OWNERS),
    PathCallPattern("abspath", owners=_OS_PATH_OWNERS),
    PathCallPattern("realpath", owners=_OS_PATH_OWNERS),
    PathCallPattern("copy", owners=_SHUTIL_OWNERS, keywords=("src",)),
    PathCallPattern("copy2", owners=_SHUTIL_OWNERS, keywords=("src",)),
    PathCallPattern("copyfile", owners=_SHUTIL_OWNERS, keywords=("src",)),
    PathCallPattern("copytree", owners=_SHUTIL_OWNERS, keywords=("src",)),
    PathCallPattern("move", owners=_SHUTIL_OWNERS, keywords=("src",)),
    PathCallPattern("rmtree", owners=_SHUTIL_OWNERS, keywords=("path",)),
    PathCallPattern("glob", owners=("glob",), keywords=("pathname",)),
    PathCallPattern("iglob", owners=("glob",), keywords=("pathname",)),
)

# Keyword names that mark a path argument on any call.
PATH_KEYWORD_NAMES = frozenset(
    {"path", "filepath", "filename", "file", "fname", "file_path", "filepath_or_buffer"}
)


def pattern_from_name(dotted: str) -> PathCallPattern:
    """Build a first-positional pattern from a user-supplied dotted name."""
    owner, _, name = dotted.strip().rpartition(".")
    return PathCallPattern(name=name, owners=(owner,) if owner else ())


@lru_cache(maxsize=16)
def build_call_patterns(extra_names: tuple[str, ...] = ()) -> tuple[PathCallPattern, ...]:
    """Return the built-in table extended with user-configured callables."""
    extra = tuple(pattern_from_name(name) for name in extra_names if name.strip())
    return DEFAULT_CALL_PATTERNS + extra


def find_pattern(
    full_name: str, patterns: tuple[PathCallPattern, ...]
) -> PathCallPattern | None:
    """Return the first pattern matching a (possibly dotted) callable name."""
    owner, _, base = full_name.rpartition(".")
    for pattern in patterns:
        if pattern.name != base:
            continue
        if not pattern.owners or owner in pattern.owners:
            return pattern
    return None
