from __future__ import annotations

from ..bot.context import BotContext
from ..bot.formatters import UNDO_HINT, count_statuses, format_absent_summary, format_mark_summary, md, plural
from ..bot.keyboards import attendance_keyboard
from ..bot.router import UpdateRouter
from ..core.constants import GENERIC_FAILURE_MESSAGE
from ..core.enums import ActionType, CallbackAction, MarkStatus
from ..container import Container
from .resolver import parse_index_args
from .selection import parse_payload, to_indices, toggle

NO_CLASSES_TODAY = "📭 You have no classes scheduled for today."


def register(router: UpdateRouter, container: Container) -> None:
    schedule = container.schedule_service
    attendance = container.attendance_service
    tz = container.settings.tz

    @router.command("attend", "a")
    async def attend(ctx: BotContext) -> None:
        today = schedule.today()
        classes = schedule.get_classes_for_date(ctx.user_id, today)
        if not classes:
            await ctx.reply(NO_CLASSES_TODAY)
            return

        if ctx.args:
            indices = parse_index_args(ctx.args, len(classes))
            results = attendance.mark_present_by_indices(ctx.user_id, classes, indices)
            await ctx.reply(format_mark_summary(results), markdown=True)
            return

        # Single class: nothing to choose.
        if len(classes) == 1:
            result = attendance.mark_present_all(ctx.user_id, classes)[0]
            name = md(result.course_name)
            if result.status == MarkStatus.MARKED:
                await ctx.reply(f"Marked present.\n\n{name}\n\n{UNDO_HINT}", markdown=True)
            elif result.status == MarkStatus.ALREADY:
                await ctx.reply(f"Already marked present for {name}.", markdown=True)
            else:
                await ctx.reply(GENERIC_FAILURE_MESSAGE)
            return

        mask = 0
        text = "*Select classes to mark present:*\nTap to select, then confirm. Or: /attend 1 2"
        position = schedule.find_current_or_upcoming(classes)
        if position is not None:
            mask = toggle(0, position)
            text = (
                "*Current/Upcoming Class Pre-selected*\n\n"
                f"{md(classes[position].course_name)} is starting soon.\n\n"
                "Tap to adjust selection, then confirm."
            )

        await ctx.reply(text, reply_markup=attendance_keyboard(classes, today, mask, tz=tz), markdown=True)

    @router.command("absent", "ab")
    async def absent(ctx: BotContext) -> None:
        today = schedule.today()
        classes = schedule.get_classes_for_date(ctx.user_id, today)
        if not classes:
            await ctx.reply(NO_CLASSES_TODAY)
            return

        if ctx.args:
            indices = parse_index_args(ctx.args, len(classes))
            results = attendance.mark_absent_by_indices(ctx.user_id, classes, indices)
            await ctx.reply(format_absent_summary(len(results)), markdown=True)
            return

        if len(classes) == 1:
            attendance.mark_absent_all(ctx.user_id, classes)
            await ctx.reply(f"Marked absent.\n\n{md(classes[0].course_name)}\n\n{UNDO_HINT}", markdown=True)
            return

        await ctx.reply(
            "*Select classes to mark absent:*\nTap to select, then confirm. Or: /absent 1 2",
            reply_markup=attendance_keyboard(classes, today, 0, tz=tz),
            markdown=True,
        )

    @router.command("attend_all", "aa")
    async def attend_all(ctx: BotContext) -> None:
        classes = schedule.get_classes_for_date(ctx.user_id, schedule.today())
        if not classes:
            await ctx.reply(NO_CLASSES_TODAY)
            return

        results = attendance.mark_present_all(ctx.user_id, classes)
        await ctx.reply(format_mark_summary(results), markdown=True)

    @router.command("absent_all")
    async def absent_all(ctx: BotContext) -> None:
        classes = schedule.get_classes_for_date(ctx.user_id, schedule.today())
        if not classes:
            await ctx.reply(NO_CLASSES_TODAY)
            return

        attendance.mark_absent_all(ctx.user_id, classes)
        await ctx.reply(
            f"Marked all {len(classes)} {plural(len(classes))} absent.\n\n{UNDO_HINT}",
            markdown=True,
        )

    @router.callback(CallbackAction.SELECT.value)
    async def on_select(ctx: BotContext) -> None:
        payload = parse_payload(ctx.callback_data)
        classes = schedule.get_classes_for_date(ctx.user_id, payload.class_date)
        payload.check_against(len(classes))

        mask = toggle(payload.mask, payload.index)
        await ctx.edit_markup(attendance_keyboard(classes, payload.class_date, mask, tz=tz))
        await ctx.answer()

    @router.callback(CallbackAction.CONFIRM.value)
    async def on_confirm(ctx: BotContext) -> None:
        payload = parse_payload(ctx.callback_data)
        classes = schedule.get_classes_for_date(ctx.user_id, payload.class_date)
        payload.check_against(len(classes))

        indices = to_indices(payload.mask, len(classes))
        if not indices:
            await ctx.answer("⚠️ No classes selected!", show_alert=True)
            return

        if payload.action_type == ActionType.ATTEND:
            results = attendance.mark_present_by_indices(ctx.user_id, classes, indices)
            counts = count_statuses(results)
            await ctx.edit_text(
                "✅ *Attendance Marked*\n\n"
                f"Selected: {len(indices)}\n"
                f"New: {counts[MarkStatus.MARKED]} | Existing: {counts[MarkStatus.ALREADY]} | "
                f"Failed: {counts[MarkStatus.FAILED]}\n\n"
                f"{UNDO_HINT}",
                markdown=True,
            )
        else:
            attendance.mark_absent_by_indices(ctx.user_id, classes, indices)
            await ctx.edit_text(
                f"📝 *Absence Recorded*\n\nMarked absent for {len(indices)} selected {plural(len(indices))}.\n\n{UNDO_HINT}",
                markdown=True,
            )
        await ctx.answer()

    @router.callback(CallbackAction.ATTEND_ALL.value, CallbackAction.ABSENT_ALL.value)
    async def on_bulk(ctx: BotContext) -> None:
        payload = parse_payload(ctx.callback_data)
        classes = schedule.get_classes_for_date(ctx.user_id, payload.class_date)
        payload.check_against(len(classes))

        if payload.action == CallbackAction.ATTEND_ALL:
            results = attendance.mark_present_all(ctx.user_id, classes)
            counts = count_statuses(results)
            await ctx.edit_text(
                "✅ *All Attendance Marked*\n\n"
                f"Total: {len(classes)}\n"
                f"New: {counts[MarkStatus.MARKED]} | Existing: {counts[MarkStatus.ALREADY]} | "
                f"Failed: {counts[MarkStatus.FAILED]}\n\n"
                f"{UNDO_HINT}",
                markdown=True,
            )
        else:
            attendance.mark_absent_all(ctx.user_id, classes)
            await ctx.edit_text(
                f"📝 *All Absences Recorded*\n\nMarked absent for all {len(classes)} {plural(len(classes))}.\n\n{UNDO_HINT}",
                markdown=True,
            )
        await ctx.answer()
