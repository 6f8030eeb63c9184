"""nacptool: decode control.nacp title metadata in legacy and compressed layouts."""

__version__ = "0.1.0"
