import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class ConverterConfig:
    """Configuration for spline to quad. Bezier conversion"""
    tolerance: float = 0.01
    min_tolerance: float = 0.008

    # cartesian splines
    max_quads_per_segment: int = 3
    midpoint_tolerance: float = 0.15
    parallel_slope_tolerance: float = 0.05
    vertical_slope: float = 1e8
    quadrature_order: int = 8

    # cubic and catmull-rom splines
    max_subdivision_depth: int = 4

    def effective_tolerance(self, tolerance: Optional[float] = None) -> float:
        """Fall back to the default for missing or non-positive values and raise to the minimum"""
        if tolerance is None or not tolerance > 0:
            tolerance = self.tolerance
        return max(self.min_tolerance, tolerance)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'ConverterConfig':
        known = {f.name for f in fields(cls)}
        for key in values:
            if key not in known:
                logging.warning(f"Ignoring unknown converter setting: {key}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_args(self) -> str:
        """Render the config as command line style flags"""
        args = [f'-tolerance={self.tolerance}']

        if self.min_tolerance != 0.008:
            args.append(f'-min-tolerance={self.min_tolerance}')
        if self.max_quads_per_segment != 3:
            args.append(f'-max-quads={self.max_quads_per_segment}')
        if self.midpoint_tolerance != 0.15:
            args.append(f'-midpoint-tolerance={self.midpoint_tolerance}')
        if self.quadrature_order != 8:
            args.append(f'-quadrature-order={self.quadrature_order}')
        if self.max_subdivision_depth != 4:
            args.append(f'-max-depth={self.max_subdivision_depth}')

        return " ".join(args)
