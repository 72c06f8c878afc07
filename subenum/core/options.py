"""Translation of caller options into an immutable engine configuration."""

from __future__ import annotations

from typing import Optional

from subenum.core.models import EngineConfig, EnumerationOptions

_BUILTIN = EnumerationOptions()


def _positive(override: Optional[int], default: int, builtin: int) -> int:
    """Pick the first strictly positive value of *override*, *default*, *builtin*."""
    if override is not None and override > 0:
        return override
    if default > 0:
        return default
    return builtin


def translate(
    defaults: EnumerationOptions,
    overrides: Optional[EnumerationOptions] = None,
) -> EngineConfig:
    """Merge caller *overrides* onto *defaults*.

    Numeric options are taken from *overrides* only when strictly positive.
    When *overrides* is supplied its ``all`` and ``only_recursive`` flags are
    always used, since an omitted flag and an explicit ``false`` look the same.
    Structured JSON output is always enabled.

    Args:
        defaults: Service-wide default options.
        overrides: Options from the request body, or ``None`` if absent.

    Returns:
        Frozen :class:`EngineConfig`.
    """
    threads = timeout = max_time = None
    use_all = defaults.all
    only_recursive = defaults.only_recursive
    if overrides is not None:
        threads = overrides.threads
        timeout = overrides.timeout
        max_time = overrides.max_enumeration_time
        use_all = overrides.all
        only_recursive = overrides.only_recursive

    return EngineConfig(
        threads=_positive(threads, defaults.threads, _BUILTIN.threads),
        timeout=_positive(timeout, defaults.timeout, _BUILTIN.timeout),
        max_enumeration_time=_positive(
            max_time, defaults.max_enumeration_time, _BUILTIN.max_enumeration_time
        ),
        all=use_all,
        only_recursive=only_recursive,
        json_output=True,
    )
