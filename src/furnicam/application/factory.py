"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from furnicam.domain.services.joinery import DefaultJoineryRules, JointResolver
from furnicam.infrastructure.gcode import ToolpathEmitter
from furnicam.infrastructure.sheet_nesting import (
    SheetConfig,
    SheetNester,
    SheetNestingService,
)
from furnicam.infrastructure.solid_cuts import (
    CutSolidCache,
    SolidCutBuilder,
    TrimeshBooleanBackend,
)

if TYPE_CHECKING:
    from furnicam.application.commands import ManufacturingCommand
    from furnicam.contracts.protocols import BooleanBackend, JoineryRules


@dataclass
class ServiceFactory:
    """Builds every service once, up front, and hands them out by reference.

    Nothing is created lazily: all services exist as soon as the factory
    does, so collaborators such as the boolean backend are chosen in one
    place and never looked up at run time.

    Attributes:
        rules: Joinery rule set.
        sheet: Stock sheet used for nesting (mm).
        backend: Boolean capability for the solid cut builder.
        include_comments: Emit comments in generated G-code.
        cache_size: Number of cut-solid results to memoize; 0 disables.

    Example:
        ```python
        factory = ServiceFactory(sheet=SheetConfig(width=1220, height=2440, gap=5))
        output = factory.create_manufacturing_command().execute(spec)
        ```
    """

    rules: JoineryRules = field(default_factory=DefaultJoineryRules)
    sheet: SheetConfig = field(default_factory=SheetConfig)
    backend: BooleanBackend = field(default_factory=TrimeshBooleanBackend)
    include_comments: bool = True
    cache_size: int = 32

    resolver: JointResolver = field(init=False, repr=False)
    nesting_service: SheetNestingService = field(init=False, repr=False)
    emitter: ToolpathEmitter = field(init=False, repr=False)
    solid_builder: SolidCutBuilder | CutSolidCache = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.resolver = JointResolver(self.rules)
        self.nesting_service = SheetNestingService(SheetNester(self.sheet))
        self.emitter = ToolpathEmitter(include_comments=self.include_comments)
        builder = SolidCutBuilder(self.backend)
        self.solid_builder = (
            CutSolidCache(builder, maxsize=self.cache_size) if self.cache_size > 0 else builder
        )

    def create_manufacturing_command(self) -> ManufacturingCommand:
        """Create a ManufacturingCommand wired to this factory's services."""
        from furnicam.application.commands import ManufacturingCommand

        return ManufacturingCommand(
            resolver=self.resolver,
            nesting_service=self.nesting_service,
            emitter=self.emitter,
            solid_builder=self.solid_builder,
        )
