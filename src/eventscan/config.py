"""
Pipeline configuration for event extraction.

This module defines the PipelineConfig dataclass that captures every tunable
of the extraction pipeline and its collaborators, instead of scattering
constants through the stages.

Environment overrides (read through python-dotenv, so a .env file works):
    EVENTSCAN_STORE            Path of the JSON event store
    EVENTSCAN_OUTPUT_DIR       Directory for exports and debug dumps
    EVENTSCAN_TOKEN_MODE       "spans" or "words"
    EVENTSCAN_DEBUG_MAX_CHARS  Max characters kept in the debug dump
    EVENTSCAN_BANNERS          ";"-separated banner regexes
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import find_dotenv, load_dotenv

from eventscan.extraction.dedup import DEFAULT_HASH_ALGORITHM
from eventscan.extraction.lines import DEFAULT_GAP_THRESHOLD, DEFAULT_Y_TOLERANCE
from eventscan.extraction.pdf import TOKEN_MODES, TOKEN_MODE_SPANS
from eventscan.extraction.rows import DEFAULT_BANNER_PATTERNS


ENV_PREFIX = "EVENTSCAN_"
DEFAULT_STORE_PATH = Path("data") / "events_seen.json"
DEFAULT_DEBUG_MAX_CHARS = 20000


@dataclass
class PipelineConfig:
    """
    Configuration for the event extraction pipeline.

    Attributes:
        pdf_path: Path to the input PDF (None when only managing the store).
        store_path: JSON file holding previously saved events.
        output_dir: Directory for exports and debug dumps.

        y_tolerance: Max vertical distance from a line's anchor y.
        gap_threshold: Horizontal gap that forces a space in line text.
        banner_patterns: Regexes of running banners to drop as noise.

        debug_max_chars: Truncation length of the diagnostic line dump.
        hash_algorithm: hashlib algorithm for fingerprints.
        token_mode: Reader granularity, "spans" or "words".
        show_progress: Show a tqdm progress bar while reading pages.
    """

    # Input/Output
    pdf_path: Optional[Path] = None
    store_path: Path = field(default_factory=lambda: DEFAULT_STORE_PATH)
    output_dir: Path = field(default_factory=lambda: Path("output"))

    # Layout
    y_tolerance: float = DEFAULT_Y_TOLERANCE
    gap_threshold: float = DEFAULT_GAP_THRESHOLD
    banner_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_BANNER_PATTERNS))

    # Output/diagnostics
    debug_max_chars: int = DEFAULT_DEBUG_MAX_CHARS
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    token_mode: str = TOKEN_MODE_SPANS
    show_progress: bool = False

    def __post_init__(self):
        """Coerce paths and validate tunables."""
        if isinstance(self.pdf_path, str):
            self.pdf_path = Path(self.pdf_path)
        if isinstance(self.store_path, str):
            self.store_path = Path(self.store_path)
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

        if self.token_mode not in TOKEN_MODES:
            raise ValueError(f"token_mode must be one of {TOKEN_MODES}, got '{self.token_mode}'")
        if self.y_tolerance < 0 or self.gap_threshold < 0:
            raise ValueError("y_tolerance and gap_threshold must be non-negative")
        if self.debug_max_chars < 0:
            raise ValueError("debug_max_chars must be non-negative")

        for pattern in self.banner_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid banner pattern {pattern!r}: {exc}") from exc

    @classmethod
    def from_env(
        cls,
        pdf_path: Optional[Union[str, Path]] = None,
        env_file: Optional[Union[str, Path]] = None,
        **overrides,
    ) -> "PipelineConfig":
        """
        Create a configuration from EVENTSCAN_* environment variables.

        Args:
            pdf_path: Input PDF path.
            env_file: Optional .env file (default: the nearest .env above
                the working directory); variables already set in the
                process environment win over the file.
            **overrides: Explicit field values, applied last.

        Returns:
            PipelineConfig.
        """
        load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

        kwargs = {}
        store = os.getenv(f"{ENV_PREFIX}STORE")
        if store:
            kwargs["store_path"] = Path(store)
        output_dir = os.getenv(f"{ENV_PREFIX}OUTPUT_DIR")
        if output_dir:
            kwargs["output_dir"] = Path(output_dir)
        token_mode = os.getenv(f"{ENV_PREFIX}TOKEN_MODE")
        if token_mode:
            kwargs["token_mode"] = token_mode.strip().lower()
        max_chars = os.getenv(f"{ENV_PREFIX}DEBUG_MAX_CHARS")
        if max_chars:
            try:
                kwargs["debug_max_chars"] = int(max_chars)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}DEBUG_MAX_CHARS must be an integer, got {max_chars!r}") from exc
        banners = os.getenv(f"{ENV_PREFIX}BANNERS")
        if banners:
            kwargs["banner_patterns"] = [p.strip() for p in banners.split(";") if p.strip()]

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(pdf_path=pdf_path, **kwargs)
