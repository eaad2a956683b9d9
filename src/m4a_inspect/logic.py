from pathlib import Path
from warnings import warn

from m4a_core.atom import Atom, head_str
from m4a_core.errors import ERRORS, AtomError
from m4a_core.templates import item_list, read_metadata


def _load(path: Path) -> tuple[Atom | None, list[dict]]:
    errors = []
    if not path.is_file():
        errors.append({"code": "E_IO", "message": ERRORS["E_IO"], "path": str(path)})
        return None, errors
    try:
        with open(path, "rb") as f:
            root = read_metadata(f)
    except AtomError as e:
        err = e.to_dict()
        err["path"] = str(path)
        errors.append(err)
        return None, errors
    except OSError as e:
        errors.append({"code": "E_IO", "message": ERRORS["E_IO"], "path": str(path), "detail": str(e)})
        return None, errors
    return root, errors


def inspect_file(path: Path) -> dict:
    root, errors = _load(path)
    if errors:
        return {"status": "FAIL", "error_count": len(errors), "errors": errors}
    return {"status": "PASS", "error_count": 0, "errors": [], "atoms": [a.to_json() for a in root.children]}


def item_values(path: Path) -> dict:
    root, errors = _load(path)
    if errors:
        return {"status": "FAIL", "error_count": len(errors), "errors": errors}

    items: dict[str, list[dict]] = {}
    ilst = item_list(root)
    if ilst is None:
        warn(f"No ilst atom found in {path}")
    else:
        for item in ilst.children:
            values = items.setdefault(head_str(item.head), [])
            for d in item.children:
                if d.data is not None:
                    values.append(d.data.to_json())
    return {"status": "PASS", "error_count": 0, "errors": [], "items": items}
