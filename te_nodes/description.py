from typing import Optional

from .nodes_api import NodeRecord


def _s(value) -> str:
    return "" if value is None else str(value)


def version_info(node: NodeRecord) -> str:
    # Missing fields stay as empty segments, spacing is not normalised.
    return f"{_s(node.make)} {_s(node.model)} {_s(node.version)}"


def compute_description(node: NodeRecord, alt_description: Optional[str] = None, append: bool = False) -> str:
    """
    Work out the new description for one node.

    alt_description  append   result
    set              no       alt_description
    set              yes      "<old> <alt_description>"
    unset            yes      "<old> <Make> <Model> <Version>"
    unset            no       "<Make> <Model> <Version>"
    """
    text = alt_description if alt_description is not None else version_info(node)
    if append:
        return f"{_s(node.description)} {text}"
    return text
