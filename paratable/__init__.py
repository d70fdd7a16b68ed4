"""Statement table for parachain candidates, with a toy adder parachain and collator."""

__version__ = "0.1.0"
__all__ = ["adder", "collator", "statement", "table"]