import collections.abc
import configparser
import json
import logging
import os
import pathlib

from symcanon.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("symcanon")


logger = logging.getLogger(__name__)


class Environment(collections.abc.Mapping):
    """A collection of settings from one section of ``symcanon.ini``."""

    def __init__(self, name: str) -> None:
        self.name = name
        """The name of the settings section to select."""
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/symcanon', # Linux standard (global)
            os.environ.get('SYMCANON_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        path = iotools.search(paths, 'symcanon.ini')
        if path is None:
            raise iotools.NonExistentPathError('symcanon.ini')
        config = configparser.ConfigParser()
        config.read(path)
        if not config.has_section(self.name):
            raise KeyError(
                f"{path} has no section {self.name!r}"
            ) from None
        logger.debug("Read %r settings from %s", self.name, path)
        self._config = config[self.name]
        self.path = path

    def __len__(self) -> int:
        """The number of available setting values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available setting names."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access setting values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{self.name} has no value for {key!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{__package__}.{self.name}({self.path}):\n{self}"
