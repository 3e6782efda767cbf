from collections.abc import Iterator
from pathlib import Path


def write_classes(output_dir: Path, classes: dict[str, str]) -> Iterator[Path]:
    """Write each generated class to `<output_dir>/<ClassName>.php`, yielding the written paths."""
    output_dir.mkdir(parents=True, exist_ok=True)

    for class_name, code in classes.items():
        class_path = output_dir / f"{class_name}.php"
        class_path.write_text(f"<?php\n\n{code}")
        yield class_path
