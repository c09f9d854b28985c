"""Configuration helpers for the nanopublication converter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import math
import os

from .nanopub.models import ConversionError, Subtype

DEFAULT_BASE_URL = "http://rdf.biosemantics.org/nanopubs/cpm"
DEFAULT_P_VALUE_CUTOFF = 0.05
DEFAULT_SUBTYPE = "gda"


@dataclass(slots=True)
class ConverterConfig:
    """Run-wide settings consumed by the record transformer.

    ``subtype`` accepts either a :class:`Subtype` or its string value.  It is
    resolved once here so an unsupported value fails before any row is read.
    """

    base_url: str = DEFAULT_BASE_URL
    p_value_cutoff: float = DEFAULT_P_VALUE_CUTOFF
    subtype: Subtype = Subtype.GDA

    def __post_init__(self) -> None:
        self.subtype = Subtype.parse(self.subtype)
        self.base_url = self.base_url.rstrip("/")
        if not self.base_url:
            raise ConversionError("base_url must not be empty")
        try:
            self.p_value_cutoff = float(self.p_value_cutoff)
        except (TypeError, ValueError) as exc:
            raise ConversionError(f"Invalid p-value cutoff: {self.p_value_cutoff!r}") from exc
        if not math.isfinite(self.p_value_cutoff) or self.p_value_cutoff < 0.0:
            raise ConversionError(f"p-value cutoff must be a finite, non-negative number, got {self.p_value_cutoff}")

    @property
    def nanopub_base(self) -> str:
        """Return the URI prefix shared by every nanopub of this run."""

        return f"{self.base_url}/{self.subtype.path_segment}/"

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "CPM_",
    ) -> "ConverterConfig":
        """Create a configuration object from environment variables."""

        env = env or os.environ
        return cls(
            base_url=env.get(f"{prefix}BASE_URL", DEFAULT_BASE_URL),
            p_value_cutoff=env.get(f"{prefix}P_VALUE_CUTOFF", str(DEFAULT_P_VALUE_CUTOFF)),  # type: ignore[arg-type]
            subtype=env.get(f"{prefix}SUBTYPE", DEFAULT_SUBTYPE),  # type: ignore[arg-type]
        )


@dataclass(slots=True)
class OutputSettings:
    """Where and how generated nanopublications are written.

    ``mirrors`` lists additional targets that receive a copy of every graph
    written to the primary target.
    """

    backend: str = "memory"
    uri: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    format: str = "trig"
    path: Optional[str] = None
    options: MutableMapping[str, Any] = field(default_factory=dict)
    mirrors: Tuple["OutputSettings", ...] = field(default_factory=tuple)

    def normalized_backend(self) -> str:
        return (self.backend or "memory").lower()

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "NANOPUB_OUTPUT_",
    ) -> "OutputSettings":
        """Parse output settings from environment variables.

        ``<prefix>OPT_*`` keys are folded into ``options``.  Mirror targets use
        ``<prefix>MIRROR_<NAME>_BACKEND``, ``..._URI``, ``..._USERNAME``,
        ``..._PASSWORD`` and ``..._OPT_*``; ``<NAME>`` is any uppercase token.
        """

        env = env or os.environ
        options: dict[str, Any] = {}
        for key, value in env.items():
            if key.startswith(f"{prefix}OPT_"):
                option_key = key[len(f"{prefix}OPT_") :].lower()
                options[option_key] = value

        mirror_prefix = f"{prefix}MIRROR_"
        grouped: dict[str, dict[str, Any]] = {}
        for key, value in env.items():
            if not key.startswith(mirror_prefix):
                continue
            remainder = key[len(mirror_prefix) :]
            token, _, setting = remainder.partition("_")
            if not setting:
                continue
            grouped.setdefault(token.upper(), {})[setting.upper()] = value

        mirrors: list[OutputSettings] = []
        for token in sorted(grouped):
            settings = grouped[token]
            mirrors.append(
                cls(
                    backend=str(settings.get("BACKEND", "memory")).lower(),
                    uri=settings.get("URI"),
                    username=settings.get("USERNAME"),
                    password=settings.get("PASSWORD"),
                    options={k[4:].lower(): v for k, v in settings.items() if k.startswith("OPT_")},
                )
            )

        return cls(
            backend=env.get(f"{prefix}BACKEND", "memory").lower(),
            uri=env.get(f"{prefix}URI"),
            username=env.get(f"{prefix}USERNAME"),
            password=env.get(f"{prefix}PASSWORD"),
            format=env.get(f"{prefix}FORMAT", "trig"),
            path=env.get(f"{prefix}PATH"),
            options=options,
            mirrors=tuple(mirrors),
        )
