"""Command handlers bound to the preview keymaps."""

from __future__ import annotations

from region_ring.commands import CommandContext, CommandResult


def start_preview(context: CommandContext) -> CommandResult:
    session = context.preview.start()
    return CommandResult(
        context.command_id, status="preview_start", value=session.region
    )


def preview_backward(context: CommandContext) -> CommandResult:
    region = context.preview.backward(context.count)
    return CommandResult(context.command_id, status="preview_move", value=region)


def preview_forward(context: CommandContext) -> CommandResult:
    region = context.preview.forward(context.count)
    return CommandResult(context.command_id, status="preview_move", value=region)


def preview_activate(context: CommandContext) -> CommandResult:
    region = context.preview.activate()
    return CommandResult(context.command_id, status="preview_activate", value=region)


__all__ = ["preview_activate", "preview_backward", "preview_forward", "start_preview"]
