import pathlib
import typing


PathLike = typing.TypeVar('PathLike')
PathLike = typing.Union[str, pathlib.Path]


class NonExistentPathError(Exception):

    def __init__(self, path: str=None):
        self._path = path

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = "The requested path"
        return self._path

    def __str__(self):
        return f"{self.path} does not exist."


def full_path(path: PathLike) -> pathlib.Path:
    """Expand and resolve `path`, which must exist."""
    full = pathlib.Path(path).expanduser().resolve()
    if not full.exists():
        raise NonExistentPathError(full)
    return full


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The paths to search, in the order given. Each member may be a directory
        that may contain `file`, the path to a file, or `None`. This function
        will skip `None` and paths that do not exist.

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the first match, if found.
    """
    for p in paths:
        if p is None:
            continue
        path = pathlib.Path(p).expanduser()
        if path.is_dir():
            test = path / str(file)
            if test.is_file():
                return full_path(test)
        elif path.is_file():
            return full_path(path)
