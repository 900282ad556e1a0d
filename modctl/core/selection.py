"""未显式指定模块时的交互式选择"""

from __future__ import annotations

from typing import Sequence

from modctl.core.exceptions import UserAbort, ValidationError
from modctl.core.protocols import Prompter

SELECT_PROMPT = "输入要选择的模块编号（逗号分隔，可用 1-3 表示范围），直接回车表示不选"


def select_names(prompter: Prompter | None, options: Sequence[str]) -> list[str]:
    """让用户从 options 中多选，空选择视为良性中止"""
    if prompter is None:
        raise ValidationError("未指定模块且当前不支持交互式选择")
    idxs = set(prompter.select_many(SELECT_PROMPT, options))
    chosen = [name for i, name in enumerate(options) if i in idxs]
    if not chosen:
        raise UserAbort("未选择任何模块")
    return chosen
