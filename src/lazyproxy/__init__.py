from .codegen import generate_lazy_ghost, generate_lazy_proxy
from .dumper import Definition, LazyServiceDumper
from .reflection import ClassDescriptor, ClassRegistry

__all__ = [
    "ClassDescriptor",
    "ClassRegistry",
    "Definition",
    "LazyServiceDumper",
    "generate_lazy_ghost",
    "generate_lazy_proxy",
]
