# Railsim - Procedural train driving game core (headless)

__version__ = "0.1.0"
