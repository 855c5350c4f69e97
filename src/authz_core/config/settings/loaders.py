"""Config settings – where :class:`Settings` values come from.

Each dataclass field ``foo_bar`` of a settings class with ``_prefix = "AUTHZ"``
is read from ``AUTHZ_FOO_BAR``. Values are parsed according to the field's
annotation (``str``, ``int``, ``float``, ``bool`` or an optional of one of
them); an empty string for an optional field means ``None``.
"""
from __future__ import annotations

import abc
import dataclasses
import os
import types
import typing
from typing import Any, Callable, Mapping, TypeVar

from authz_core.config.settings.base import Settings
from authz_core.config.validation import ConfigError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"expected one of {sorted(_TRUE | _FALSE - {''})}")


_PARSERS: dict[Any, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: int,
    float: float,
    str: str,
}


def _split_optional(hint: Any) -> tuple[Any, bool]:
    """``(inner, True)`` for ``X | None``, else ``(hint, False)``."""
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1 and len(args) < len(typing.get_args(hint)):
            return args[0], True
    return hint, False


def parse_value(raw: str, hint: Any) -> Any:
    inner, optional = _split_optional(hint)
    if optional and raw == "":
        return None
    parser = _PARSERS.get(inner)
    return parser(raw) if parser is not None else raw


class SettingsLoader(abc.ABC):
    """Port: produce a validated settings instance."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Reads the process environment, or *environ* when one is given."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = settings_class._prefix.upper()
        hints = typing.get_type_hints(settings_class)
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):
            key = f"{prefix}_{field.name.upper()}" if prefix else field.name.upper()
            if key not in environ:
                required = (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING
                )
                if required:
                    raise MissingRequiredSettingError(key)
                continue
            raw = environ[key]
            try:
                values[field.name] = parse_value(raw, hints.get(field.name, str))
            except ValueError as exc:
                raise ConfigError(f"Cannot parse {key}={raw!r}: {exc}", setting=key, cause=exc) from exc

        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Loads *env_file* into the environment, then behaves like :class:`EnvSettingsLoader`.

    Variables already set win unless *override* is true.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        try:
            from dotenv import load_dotenv  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError("Install 'authz-core[dotenv]' to use DotenvSettingsLoader") from exc
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "parse_value"]
