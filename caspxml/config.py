import os
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_CREATOR, DEFAULT_ICON
from .tuning import normalize_icon


@dataclass(frozen=True)
class TuningConfig:
    creator: str = DEFAULT_CREATOR
    base_name: Optional[str] = None
    icon: str = DEFAULT_ICON
    subtype: Optional[str] = None
    part_type: Optional[str] = None
    input_dir: str = "."
    output_dir: str = "."

    @classmethod
    def from_args(cls, args):
        """Build from an argparse namespace, icon normalised and dirs made absolute"""
        return cls(
            creator=args.creator,
            base_name=args.basename or None,
            icon=normalize_icon(args.icon),
            subtype=args.subtype,
            part_type=args.type,
            input_dir=os.path.abspath(args.input),
            output_dir=os.path.abspath(args.output),
        )
