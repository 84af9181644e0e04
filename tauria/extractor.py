"""Extraction pipeline: source text in, immutable module models out."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from .config import ExtractorConfig, load_config
from .extractors.aliases import resolve_aliases
from .extractors.commands import CommandExtractor
from .extractors.events import EventExtractor
from .extractors.types import index_types, model_types
from .logging import configure_logging, get_logger
from .models import ModuleModel, ProjectModel
from .syntax.parser import ModuleParseError, RustParser

Sources = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class Extractor:
    """Runs the two-phase extraction for Rust modules.

    Phase one models every struct and enum of a module; the completed type
    index is then handed explicitly to the command and event extractors. An
    instance owns a tree-sitter parser and must not be shared between threads.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None, parser: Optional[RustParser] = None) -> None:
        self.config = config or ExtractorConfig()
        self.parser = parser or RustParser()
        self.logger = get_logger("extractor")
        namespace = self.config.types.foreign_namespace
        self.commands = CommandExtractor(self.config.commands, namespace)
        self.events = EventExtractor(self.parser, self.config.events, namespace)

    @classmethod
    def from_config_file(cls, config_path: Path, *, verbose: bool = False) -> "Extractor":
        """Load `.tauria.yml` (defaults when absent) and apply its logging settings."""
        config = load_config(config_path)
        configure_logging(verbose=verbose, level=config.logging.level, log_file=config.logging.file)
        return cls(config)

    def extract_module(self, source: str, module_id: str) -> ModuleModel:
        """Model one module.

        Raises :class:`ModuleParseError` when ``source`` is not well-formed;
        nothing is returned for that module in that case.
        """
        module = self.parser.parse_module(source, module_id)
        types = model_types(module, module_id, self.config.types.foreign_namespace)
        type_index = index_types(types)
        aliases = resolve_aliases(module.uses)
        commands = self.commands.extract(module, type_index, aliases)
        global_events, window_events = self.events.extract(module, type_index, aliases)
        self.logger.debug(
            "Extracted %s: %d types, %d commands, %d global events, %d window events",
            module_id,
            len(types),
            len(commands),
            len(global_events),
            len(window_events),
        )
        return ModuleModel(
            module_id=module_id,
            types=tuple(types),
            commands=tuple(commands),
            global_events=tuple(global_events),
            window_events=tuple(window_events),
        )

    def extract_project(self, sources: Sources) -> ProjectModel:
        """Model every ``(module_id, source)`` pair in order.

        The first module that fails to parse aborts the whole run.
        """
        pairs = sources.items() if isinstance(sources, Mapping) else sources
        modules: List[ModuleModel] = []
        for module_id, source in pairs:
            self.logger.info("Processing module %s", module_id)
            try:
                modules.append(self.extract_module(source, module_id))
            except ModuleParseError as exc:
                self.logger.error("Failed to parse %s at line %d: %s", module_id, exc.line, exc.detail)
                raise
        project = ProjectModel.from_modules(tuple(modules))
        self.logger.info(
            "Extracted %d modules (%d with commands, %d types)",
            len(project.modules),
            len(project.command_modules),
            len(project.types),
        )
        return project


def extract_module(source: str, module_id: str, config: Optional[ExtractorConfig] = None) -> ModuleModel:
    """Convenience wrapper building a throwaway :class:`Extractor`."""
    return Extractor(config).extract_module(source, module_id)


__all__ = ["Extractor", "Sources", "extract_module"]
