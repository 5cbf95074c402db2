"""Conversion backend adapters."""

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.adapters.builtins import BUILTIN_BACKENDS, default_registry
from formatrouter.adapters.imagemagick import ImageMagickAdapter
from formatrouter.adapters.inkscape import InkscapeAdapter
from formatrouter.adapters.libreoffice import LibreOfficeAdapter

__all__ = [
    "BUILTIN_BACKENDS",
    "ConverterAdapter",
    "ImageMagickAdapter",
    "InkscapeAdapter",
    "LibreOfficeAdapter",
    "default_registry",
]
