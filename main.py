#!/usr/bin/env python3
"""NOC Configuration - CLI Entry Point."""
import sys
import asyncio
import functools
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.table import Table

from __version__ import __version__
from models.enums import ChannelType, DurationUnit, MaintenanceStatus, Operator, Severity, Weekday

console = Console()

OPERATOR_CHOICES = [op.value for op in Operator]
UNIT_CHOICES = [u.value for u in DurationUnit]
SEVERITY_CHOICES = [s.value for s in Severity]
DAY_CHOICES = [d.value for d in Weekday]
STATUS_CHOICES = [s.value for s in MaintenanceStatus]
CHANNEL_TYPE_CHOICES = [t.value for t in ChannelType]


def _init_components(config_path=None, verbose=False):
    """Lazy initialization of all components."""
    from utils.logger import setup_logging
    from utils.cache import JSONFileCache
    from config import load_config
    from api.config_client import ConfigAPIClient
    from settings.controller import SettingsController
    from settings.stores import HTTPSettingsStore

    config = load_config(config_path)
    log_cfg = config.get("logging", {})
    setup_logging("DEBUG" if verbose else log_cfg.get("level", "INFO"), log_cfg.get("file"))

    api = ConfigAPIClient(config)
    cache = JSONFileCache(config["cache"]["path"])
    controller = SettingsController(
        HTTPSettingsStore(api), cache,
        cache_key=config["cache"].get("settings_key", "global-config-settings"),
    )

    return {"config": config, "api": api, "cache": cache, "settings": controller}


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="nocconfig")
@click.pass_context
def cli(ctx, config_path, verbose):
    """NOC Configuration - threshold rules, channels, policies, maintenance & global settings."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _get_components(ctx):
    if "_components" not in ctx.obj:
        ctx.obj["_components"] = _init_components(ctx.obj.get("config_path"), ctx.obj.get("verbose"))
    return ctx.obj["_components"]


def api_command(func):
    """Report backend failures as a console error and exit code 1."""
    from utils.http_client import APIError

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIError as e:
            console.print(f"[red]✗[/red] Backend request failed: {e}")
            sys.exit(1)
    return wrapper


def _require(record, kind, record_id):
    if record is None:
        console.print(f"[red]No {kind} record with id {record_id}[/red]")
        sys.exit(1)
    return record


def _flag(value):
    return "[green]✓[/green]" if value else "[red]✗[/red]"


# ──────────────────────────────────────────────────────
# THRESHOLD RULES
# ──────────────────────────────────────────────────────
@cli.group()
def rules():
    """Threshold rule management."""
    pass


@rules.command("list")
@click.pass_context
@api_command
def rules_list(ctx):
    """List all threshold rules."""
    c = _get_components(ctx)
    table = Table(title="Threshold Rules", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Status")
    table.add_column("Rule Name")
    table.add_column("Condition")
    table.add_column("Duration")
    table.add_column("Severity")
    for r in c["api"].list_rules():
        table.add_row(r.id, _flag(r.enabled), r.name, r.condition, r.duration, r.severity.upper())
    console.print(table)


@rules.command("show")
@click.argument("rule_id")
@click.pass_context
@api_command
def rules_show(ctx, rule_id):
    """Show a rule with its condition decoded into form fields."""
    from codec.forms import rule_to_form

    c = _get_components(ctx)
    rule = _require(c["api"].get("rules", rule_id), "rule", rule_id)
    form = rule_to_form(rule)
    console.print(f"[bold]{rule.name}[/bold]  [dim]{rule.id}[/dim]")
    if rule.description:
        console.print(f"  {rule.description}")
    console.print(f"  Metric:    {form.condition_metric}")
    console.print(f"  Operator:  {form.condition_operator or '[dim]-[/dim]'}")
    console.print(f"  Value:     {form.condition_value}")
    console.print(f"  Duration:  {form.duration_value} {form.duration_unit}")
    console.print(f"  Severity:  {form.severity}")
    console.print(f"  Enabled:   {_flag(rule.enabled)}")


def _rule_options(func):
    options = [
        click.option("--name", default=None, help="Rule name"),
        click.option("--description", default=None, help="Rule description"),
        click.option("--metric", default=None, help="Metric, e.g. CPU, Latency"),
        click.option("--operator", type=click.Choice(OPERATOR_CHOICES), default=None),
        click.option("--value", type=int, default=None, help="Threshold value"),
        click.option("--duration-value", type=int, default=None, help="How long the condition must hold"),
        click.option("--duration-unit", type=click.Choice(UNIT_CHOICES), default=None),
        click.option("--severity", type=click.Choice(SEVERITY_CHOICES), default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _apply_rule_options(form, **opts):
    mapping = {
        "name": "name", "description": "description", "metric": "condition_metric",
        "operator": "condition_operator", "value": "condition_value",
        "duration_value": "duration_value", "duration_unit": "duration_unit", "severity": "severity",
    }
    changes = {mapping[k]: v for k, v in opts.items() if v is not None}
    return replace(form, **changes)


@rules.command("create")
@_rule_options
@click.pass_context
@api_command
def rules_create(ctx, **opts):
    """Create a rule. Percentage thresholds are clamped to 0-100."""
    from codec.forms import rule_form_payload
    from models.records import DEFAULT_RULE_FORM

    c = _get_components(ctx)
    payload = rule_form_payload(_apply_rule_options(DEFAULT_RULE_FORM, **opts))
    c["api"].create("rules", payload)
    console.print(f"[green]✓[/green] New rule \"{payload['name']}\" created: {payload['condition']} for {payload['duration']}")


@rules.command("edit")
@click.argument("rule_id")
@_rule_options
@click.pass_context
@api_command
def rules_edit(ctx, rule_id, **opts):
    """Edit a rule; unspecified fields keep their decoded values."""
    from codec.forms import rule_form_payload, rule_to_form

    c = _get_components(ctx)
    rule = _require(c["api"].get("rules", rule_id), "rule", rule_id)
    payload = rule_form_payload(_apply_rule_options(rule_to_form(rule), **opts))
    c["api"].update("rules", rule_id, payload)
    console.print(f"[green]✓[/green] Rule \"{payload['name']}\" updated: {payload['condition']} for {payload['duration']}")


@rules.command("delete")
@click.argument("rule_id")
@click.confirmation_option(prompt="Delete this rule?")
@click.pass_context
@api_command
def rules_delete(ctx, rule_id):
    """Delete a rule."""
    c = _get_components(ctx)
    rule = _require(c["api"].get("rules", rule_id), "rule", rule_id)
    c["api"].delete("rules", rule_id)
    console.print(f"[green]✓[/green] Rule \"{rule.name}\" deleted")


@rules.command("duplicate")
@click.argument("rule_id")
@click.pass_context
@api_command
def rules_duplicate(ctx, rule_id):
    """Create a copy of a rule."""
    from codec.forms import duplicate_payload

    c = _get_components(ctx)
    rule = _require(c["api"].get("rules", rule_id), "rule", rule_id)
    payload = duplicate_payload(rule)
    c["api"].create("rules", payload)
    console.print(f"[green]✓[/green] Rule duplicated as \"{payload['name']}\"")


@rules.command("toggle")
@click.argument("rule_id")
@click.pass_context
@api_command
def rules_toggle(ctx, rule_id):
    """Enable or disable a rule."""
    c = _get_components(ctx)
    rule = _require(c["api"].get("rules", rule_id), "rule", rule_id)
    c["api"].toggle("rules", rule)
    state = "disabled" if rule.enabled else "enabled"
    console.print(f"[green]✓[/green] Rule \"{rule.name}\" {state}")


# ──────────────────────────────────────────────────────
# MAINTENANCE WINDOWS
# ──────────────────────────────────────────────────────
@cli.group()
def maintenance():
    """Maintenance window management."""
    pass


@maintenance.command("list")
@click.pass_context
@api_command
def maintenance_list(ctx):
    """List maintenance windows."""
    from codec.schedule import is_weekly_schedule

    c = _get_components(ctx)
    table = Table(title="Maintenance Windows", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Schedule")
    table.add_column("Duration")
    table.add_column("Status")
    for m in c["api"].list_maintenance():
        schedule = m.schedule if is_weekly_schedule(m.schedule) else f"{m.schedule} [yellow](one-off)[/yellow]"
        table.add_row(m.id, m.name, schedule, m.duration, m.status.capitalize())
    console.print(table)


@maintenance.command("create")
@click.option("--name", required=True, help="Window name")
@click.option("--day", type=click.Choice(DAY_CHOICES), default="Sunday")
@click.option("--hour", type=click.IntRange(0, 23), default=2)
@click.option("--minute", type=click.IntRange(0, 59), default=0)
@click.option("--duration-value", type=click.IntRange(min=1), default=2)
@click.option("--duration-unit", type=click.Choice(UNIT_CHOICES), default="hours")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="scheduled")
@click.pass_context
@api_command
def maintenance_create(ctx, name, day, hour, minute, duration_value, duration_unit, status):
    """Schedule a weekly maintenance window."""
    from codec.forms import maintenance_form_payload
    from models.records import MaintenanceForm

    c = _get_components(ctx)
    payload = maintenance_form_payload(MaintenanceForm(
        name=name, schedule_day_of_week=day, schedule_hour=hour, schedule_minute=minute,
        duration_value=duration_value, duration_unit=duration_unit, status=status,
    ))
    c["api"].create("maintenance", payload)
    console.print(f"[green]✓[/green] Window \"{name}\" created: {payload['schedule']} for {payload['duration']}")


@maintenance.command("delete")
@click.argument("window_id")
@click.confirmation_option(prompt="Delete this maintenance window?")
@click.pass_context
@api_command
def maintenance_delete(ctx, window_id):
    """Delete a maintenance window."""
    c = _get_components(ctx)
    window = _require(c["api"].get("maintenance", window_id), "maintenance", window_id)
    c["api"].delete("maintenance", window_id)
    console.print(f"[green]✓[/green] Window \"{window.name}\" deleted")


# ──────────────────────────────────────────────────────
# CHANNELS & POLICIES
# ──────────────────────────────────────────────────────
@cli.group()
def channels():
    """Notification channel management."""
    pass


@channels.command("list")
@click.pass_context
@api_command
def channels_list(ctx):
    """List notification channels."""
    c = _get_components(ctx)
    table = Table(title="Notification Channels", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Channel Name")
    table.add_column("Details")
    table.add_column("Active")
    for ch in c["api"].list_channels():
        table.add_row(ch.id, ch.type, ch.name, ch.meta, _flag(ch.active))
    console.print(table)


@channels.command("create")
@click.option("--name", required=True, help="Slack channel, email address or phone number")
@click.option("--type", "channel_type", type=click.Choice(CHANNEL_TYPE_CHOICES), default=None)
@click.option("--meta", default=None, help="Alert filter, e.g. 'Critical only'")
@click.pass_context
@api_command
def channels_create(ctx, name, channel_type, meta):
    """Add a notification channel (created active)."""
    from codec.forms import channel_form_payload
    from models.records import DEFAULT_CHANNEL_FORM, new_form

    c = _get_components(ctx)
    form = new_form(DEFAULT_CHANNEL_FORM)
    form.name = name
    form.type = channel_type or form.type
    form.meta = meta if meta is not None else form.meta
    payload = channel_form_payload(form, create=True)
    c["api"].create("channels", payload)
    console.print(f"[green]✓[/green] Channel \"{name}\" created ({payload['type']})")


@channels.command("edit")
@click.argument("channel_id")
@click.option("--name", default=None)
@click.option("--type", "channel_type", type=click.Choice(CHANNEL_TYPE_CHOICES), default=None)
@click.option("--meta", default=None)
@click.pass_context
@api_command
def channels_edit(ctx, channel_id, name, channel_type, meta):
    """Edit a channel; unspecified fields keep their current values."""
    from codec.forms import channel_form_payload, channel_to_form

    c = _get_components(ctx)
    form = channel_to_form(_require(c["api"].get("channels", channel_id), "channel", channel_id))
    changes = {"name": name, "type": channel_type, "meta": meta}
    form = replace(form, **{k: v for k, v in changes.items() if v is not None})
    c["api"].update("channels", channel_id, channel_form_payload(form))
    console.print(f"[green]✓[/green] Channel \"{form.name}\" updated")


@cli.group()
def policies():
    """Escalation policy management."""
    pass


@policies.command("list")
@click.pass_context
@api_command
def policies_list(ctx):
    """List escalation policies."""
    c = _get_components(ctx)
    table = Table(title="Escalation Policies", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Policy Name")
    table.add_column("Description")
    table.add_column("Steps", justify="right")
    table.add_column("Active")
    for p in c["api"].list_policies():
        table.add_row(p.id, p.name, p.description, str(p.steps), _flag(p.active))
    console.print(table)


@policies.command("create")
@click.option("--name", required=True, help="Policy name")
@click.option("--description", default="", help="Escalation steps, e.g. 'L1 -> L2 (15m) -> Manager'")
@click.option("--steps", type=click.IntRange(1, 5), default=None)
@click.pass_context
@api_command
def policies_create(ctx, name, description, steps):
    """Add an escalation policy (created active)."""
    from codec.forms import policy_form_payload
    from models.records import DEFAULT_POLICY_FORM, new_form

    c = _get_components(ctx)
    form = new_form(DEFAULT_POLICY_FORM)
    form.name = name
    form.description = description
    form.steps = steps or form.steps
    payload = policy_form_payload(form, create=True)
    c["api"].create("policies", payload)
    console.print(f"[green]✓[/green] Policy \"{name}\" created with {payload['steps']} step(s)")


@policies.command("edit")
@click.argument("policy_id")
@click.option("--name", default=None)
@click.option("--description", default=None)
@click.option("--steps", type=click.IntRange(1, 5), default=None)
@click.pass_context
@api_command
def policies_edit(ctx, policy_id, name, description, steps):
    """Edit a policy; unspecified fields keep their current values."""
    from codec.forms import policy_form_payload, policy_to_form

    c = _get_components(ctx)
    form = policy_to_form(_require(c["api"].get("policies", policy_id), "policy", policy_id))
    changes = {"name": name, "description": description, "steps": steps}
    form = replace(form, **{k: v for k, v in changes.items() if v is not None})
    c["api"].update("policies", policy_id, policy_form_payload(form))
    console.print(f"[green]✓[/green] Policy \"{form.name}\" updated")


# ──────────────────────────────────────────────────────
# GLOBAL SETTINGS
# ──────────────────────────────────────────────────────
@cli.group("settings")
def settings_group():
    """Global alerting settings."""
    pass


def _print_settings(current):
    from models.settings import SETTING_KEYS

    table = Table(title="Global Settings", show_header=True)
    table.add_column("Key", style="dim")
    table.add_column("Setting")
    table.add_column("Description")
    table.add_column("On")
    for key in SETTING_KEYS:
        table.add_row(key.name, key.label, key.description, _flag(getattr(current, key.name)))
    console.print(table)


@settings_group.command("show")
@click.pass_context
def settings_show(ctx):
    """Show global settings (falls back to local cache, then defaults)."""
    c = _get_components(ctx)
    _print_settings(asyncio.run(c["settings"].load()))


@settings_group.command("toggle")
@click.argument("key")
@click.pass_context
def settings_toggle(ctx, key):
    """Flip one global setting, e.g. maintenance_mode."""
    from models.settings import SETTING_KEYS, resolve_key

    if resolve_key(key) is None:
        names = ", ".join(k.name for k in SETTING_KEYS)
        raise click.BadParameter(f"unknown setting {key!r} (choose from {names})", param_hint="KEY")

    c = _get_components(ctx)
    controller = c["settings"]

    async def _run():
        await controller.load()
        return await controller.toggle(key)

    result = asyncio.run(_run())
    if result.ok:
        console.print(f"[green]✓[/green] {result.key} is now {'on' if getattr(controller.current, result.key) else 'off'}")
    else:
        console.print(f"[red]✗[/red] {result.error}")
        _print_settings(controller.current)
        sys.exit(1)


# ──────────────────────────────────────────────────────
# CODEC PREVIEW
# ──────────────────────────────────────────────────────
@cli.group("codec")
def codec_group():
    """Decode persisted rule text into its structured fields."""
    pass


@codec_group.command("condition")
@click.argument("text")
def codec_condition(text):
    from codec.condition import decode_condition

    cond = decode_condition(text)
    console.print(f"metric={cond.metric!r} operator={cond.operator!r} value={cond.value!r}")


@codec_group.command("duration")
@click.argument("text")
def codec_duration(text):
    from codec.duration import decode_duration

    dur = decode_duration(text)
    console.print(f"value={dur.value} unit={dur.unit}")


@codec_group.command("schedule")
@click.argument("text")
def codec_schedule(text):
    from codec.schedule import decode_schedule, is_weekly_schedule

    sched = decode_schedule(text)
    console.print(f"day={sched.day} time={sched.hour:02d}:{sched.minute:02d} timezone={sched.timezone}")
    if not is_weekly_schedule(text):
        console.print("[yellow]Text is not a weekly schedule; defaults were used where it did not match.[/yellow]")


# ──────────────────────────────────────────────────────
# WEB
# ──────────────────────────────────────────────────────
@cli.command()
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--host", default=None, type=str, help="Host to bind to")
@click.pass_context
def web(ctx, port, host):
    """Serve the settings and codec JSON API."""
    from web.app import create_app

    c = _get_components(ctx)
    web_cfg = c["config"].get("web", {})
    host = host or web_cfg.get("host", "127.0.0.1")
    port = port or web_cfg.get("port", 5000)

    asyncio.run(c["settings"].load())
    app = create_app(c["config"], {"settings": c["settings"], "api": c["api"]})

    console.print(f"\n[bold]NOC Configuration -- JSON API[/bold]\n")
    console.print(f"  Listening on http://{host}:{port}")
    console.print(f"\n  Press Ctrl+C to stop.\n")
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    cli()
