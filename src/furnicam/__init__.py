"""furnicam: joinery, sheet nesting, G-code and solid cuts for furniture parts."""

__version__ = "0.1.0"
