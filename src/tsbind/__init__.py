"""tsbind: render language-neutral type models as TypeScript declarations."""

__version__ = "0.1.0"
