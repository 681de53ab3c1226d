"""PromptCanvas: prompt-to-image front end for the Generative Language API."""

__version__ = "0.1.0"
