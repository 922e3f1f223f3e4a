"""Configuration module for makofind."""

from dataclasses import dataclass, field

from makofind.walker import MAX_DESCRIPTORS


@dataclass
class WalkerConfig:
    max_depth: int = MAX_DESCRIPTORS
    fail_fast: bool = False
    progress_interval: int = 100_000


@dataclass
class Config:
    walker: WalkerConfig = field(default_factory=WalkerConfig)
    log_format: str = "makofind: %(message)s"
