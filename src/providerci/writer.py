# writer.py
# Serialization lives outside the core: builders hand over documents,
# this module turns them into YAML files.
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import yaml

from .model import Document, ProviderFile

HEADER = "# WARNING: This file is autogenerated - changes will be overwritten if not made via providerci\n\n"


class _Dumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str):
    # multi-line shell scripts read better as literal blocks
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_Dumper.add_representer(str, _str_representer)


def render(document: Document) -> str:
    """Header + YAML for one document, keys in construction order."""
    body = yaml.dump(
        document.to_dict(),
        Dumper=_Dumper,
        sort_keys=False,
        default_flow_style=False,
        width=4096,
    )
    return HEADER + body


def write_provider_files(files: Iterable[ProviderFile], out_dir: str | Path) -> List[Path]:
    """Write each file under out_dir, creating directories as needed."""
    root = Path(out_dir)
    written: List[Path] = []
    for f in files:
        target = root / f.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render(f.data), encoding="utf-8")
        written.append(target)
    return written
