"""基于 click 的交互式选择 / 确认实现（满足 core.protocols.Prompter）"""

from __future__ import annotations

from typing import Sequence

import click


def parse_selection(text: str, count: int) -> list[int]:
    """解析 "1,3 5-7" 形式的编号输入，返回去重后的 0 基下标

    空输入表示不选。编号越界或格式错误抛 click.BadParameter，
    click.prompt 会提示错误并重新输入。
    """
    picked: list[int] = []
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_s, _, end_s = token.partition("-")
            if not (start_s.isdigit() and end_s.isdigit()):
                raise click.BadParameter(f"无效的范围: {token}")
            start, end = int(start_s), int(end_s)
            if start > end:
                raise click.BadParameter(f"范围起点大于终点: {token}")
            numbers = range(start, end + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            raise click.BadParameter(f"无效的编号: {token}")
        for n in numbers:
            if not 1 <= n <= count:
                raise click.BadParameter(f"编号超出范围 1-{count}: {n}")
            if n - 1 not in picked:
                picked.append(n - 1)
    return picked


def _echo_options(options: Sequence[str]) -> None:
    width = len(str(len(options)))
    for i, opt in enumerate(options, start=1):
        click.echo(f"  [{i:>{width}}] {opt}")


class ClickPrompter:
    """终端交互实现"""

    def select_many(self, prompt: str, options: Sequence[str]) -> list[int]:
        _echo_options(options)
        return click.prompt(
            prompt,
            default="",
            show_default=False,
            value_proc=lambda text: parse_selection(text, len(options)),
        )

    def select_one(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        _echo_options(options)
        choice = click.prompt(
            prompt, type=click.IntRange(1, len(options)), default=default + 1,
        )
        return choice - 1

    def confirm(self, prompt: str, default: bool = True) -> bool:
        return click.confirm(prompt, default=default)
