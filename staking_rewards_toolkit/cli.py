#!/usr/bin/env python3
"""
Unified CLI for the Staking Rewards Toolkit.

Examples:
  - Rewards
    staking-rewards rewards --wallet erd1... --wallet myherotag
    staking-rewards rewards --wallet erd1... --provider erd1qqq... --display cumulative --granularity 7

  - Governance
    staking-rewards governance [--quadratic] [--json]

  - Epochs
    staking-rewards epoch --epoch 1500
    staking-rewards epoch --date 2024-09-01
"""

import argparse
import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

from staking_rewards_toolkit.dashboard.controller import DerivedViews
from staking_rewards_toolkit.dashboard.session import StakingDashboard
from staking_rewards_toolkit.governance.models import GovernanceReport, VoteMode
from staking_rewards_toolkit.rewards.models import (
    Currency,
    DisplayMode,
    ViewMode,
)
from staking_rewards_toolkit.shared.constants import ChartConstants
from staking_rewards_toolkit.shared.logging import set_package_level
from staking_rewards_toolkit.shared.services.http_client import (
    aclose_async_client,
)
from staking_rewards_toolkit.utils.epochs import (
    date_to_epoch,
    epoch_to_timestamp,
    format_epoch_date,
)
from staking_rewards_toolkit.utils.formatters import (
    console,
    create_table,
    format_egld,
    format_usd,
    generate_timestamped_filename,
    save_json_output,
    shorten_address,
)
from staking_rewards_toolkit.utils.numeric import format_percent, format_share


def _epoch_label(epoch: Optional[int]) -> str:
    return "-" if epoch is None else str(epoch)


def _views_to_dict(views: DerivedViews) -> Dict[str, Any]:
    return {
        "currentEpoch": views.current_epoch,
        "params": {
            "display": views.params.display_mode.value,
            "granularity": views.params.granularity,
            "currency": views.params.currency.value,
            "view": views.params.view_mode.value,
        },
        "globalStats": views.global_stats.to_dict(),
        "providerSummary": (
            views.provider_summary.to_dict() if views.provider_summary else None
        ),
        "providers": [
            {
                "provider": p.provider_address,
                "owner": p.owner_address,
                "name": p.label,
                "totalRewards": views.provider_totals.get(p.provider_address, 0.0),
            }
            for p in views.providers
        ],
        "distribution": [
            {"wallet": s.address, "total": s.total, "percentage": s.percentage}
            for s in views.distribution
        ],
        "series": [point.to_dict() for point in views.display],
        "yDomain": list(views.y_domain),
    }


def _print_views(views: DerivedViews, errors: Dict[str, str]) -> None:
    money = format_usd if views.params.currency is Currency.USD else format_egld

    for wallet, message in errors.items():
        console.print(f"[red]{shorten_address(wallet)}:[/red] {message}")

    stats = views.global_stats
    console.print(f"\n[bold]Current epoch:[/bold] {_epoch_label(views.current_epoch)}")
    console.print(f"[bold]Total rewards:[/bold] {money(stats.total_rewards)}")
    for label, window in (("7d", stats.last_7), ("30d", stats.last_30)):
        console.print(
            f"  {label}: avg {money(window.avg)} | "
            f"min {money(window.min)} | max {money(window.max)}"
        )

    summary = views.provider_summary
    if summary is not None:
        staked = "[green]yes[/green]" if summary.currently_staked else "no"
        console.print(
            f"\n[bold]{summary.provider.label}[/bold]: "
            f"total {money(summary.total_rewards)}, "
            f"last epoch {_epoch_label(summary.last_epoch)}, currently staked {staked}"
        )

    if views.providers:
        table = create_table("Provider", "Owner", "Total rewards", right_align_from=2)
        for provider in views.providers:
            table.add_row(
                provider.label,
                shorten_address(provider.owner_address),
                format_egld(views.provider_totals.get(provider.provider_address)),
            )
        console.print("\n[bold]Providers[/bold]")
        console.print(table)

    if views.distribution:
        table = create_table("Wallet", "Total", "Share")
        for share in views.distribution:
            table.add_row(
                shorten_address(share.address),
                money(share.total),
                format_share(share.percentage),
            )
        console.print("\n[bold]Distribution[/bold]")
        console.print(table)

    if views.display:
        table = create_table("Epoch", "Date", "Total", right_align_from=2)
        for point in views.display[-10:]:
            table.add_row(
                str(point.epoch), format_epoch_date(point.epoch), money(point.total)
            )
        console.print("\n[bold]Latest points[/bold]")
        console.print(table)


def cmd_rewards(args: argparse.Namespace) -> None:
    async def run():
        dashboard = StakingDashboard()
        try:
            for value in args.wallet:
                result = await dashboard.add_wallet(value)
                if not result.success:
                    console.print(f"[red]Error:[/red] {result.message}")
            dashboard.set_view(
                display_mode=args.display,
                granularity=args.granularity,
                currency=args.currency,
                view_mode=args.view,
            )
            if args.provider:
                dashboard.set_focus_provider(args.provider)
            await dashboard.wait_idle()
            views = dashboard.views()

            if args.json:
                data = _views_to_dict(views)
                data["errors"] = dashboard.wallet_errors()
                filename = args.output or generate_timestamped_filename("rewards")
                save_json_output(data, filename)
                return

            _print_views(views, dashboard.wallet_errors())
        finally:
            await dashboard.aclose()
            await aclose_async_client()

    asyncio.run(run())


def _report_to_dict(report: GovernanceReport) -> Dict[str, Any]:
    snapshot = report.snapshot
    return {
        "mode": report.mode.value,
        "totals": {
            "yes": report.aggregate.yes,
            "no": report.aggregate.no,
            "total": report.aggregate.total,
            "yesShare": report.aggregate.yes_share,
            "noShare": report.aggregate.no_share,
        },
        "concentration": {
            "k": report.concentration.k,
            "topYes": report.concentration.top_yes,
            "topNo": report.concentration.top_no,
            "others": report.concentration.others,
        },
        "voters": snapshot.voter_count,
        "categories": [stat.to_dict() for stat in report.categories],
    }


def _print_report(report: GovernanceReport) -> None:
    aggregate = report.aggregate
    console.print(f"\n[bold]Governance votes ({report.mode.value})[/bold]")
    console.print(
        f"  YES {format_egld(aggregate.yes)} ({format_percent(aggregate.yes_share)}) | "
        f"NO {format_egld(aggregate.no)} ({format_percent(aggregate.no_share)})"
    )
    conc = report.concentration
    console.print(
        f"  Top {conc.k} YES: {format_share(conc.top_yes)} | "
        f"Top {conc.k} NO: {format_share(conc.top_no)} | "
        f"Others: {format_share(conc.others)}"
    )

    table = create_table(
        "Holders", "YES", "NO", "Voters", "YES power", "NO power", "Power share"
    )
    for stat in report.categories:
        table.add_row(
            stat.category.label,
            str(stat.yes_count),
            str(stat.no_count),
            format_percent(stat.share_total_voters),
            format_egld(stat.yes_power),
            format_egld(stat.no_power),
            format_percent(stat.share_total_power),
        )
    console.print(table)


def cmd_governance(args: argparse.Namespace) -> None:
    async def run():
        dashboard = StakingDashboard()
        try:
            result = await dashboard.refresh_governance()
            if not result.success:
                console.print(f"[red]Error:[/red] {result.message}")
                return
            mode = VoteMode.QUADRATIC if args.quadratic else VoteMode.CURRENT
            report = dashboard.governance_report(mode)

            if args.json:
                filename = args.output or generate_timestamped_filename(
                    f"governance_{mode.value}"
                )
                save_json_output(_report_to_dict(report), filename)
                return

            _print_report(report)
        finally:
            await dashboard.aclose()
            await aclose_async_client()

    asyncio.run(run())


def cmd_epoch(args: argparse.Namespace) -> None:
    if args.date:
        epoch = date_to_epoch(datetime.strptime(args.date, "%Y-%m-%d").date())
    else:
        epoch = args.epoch
    out = {
        "epoch": epoch,
        "timestamp": epoch_to_timestamp(epoch),
        "date": format_epoch_date(epoch),
    }
    if args.json:
        save_json_output(out, args.output or f"epoch_{epoch}.json")
        return
    console.print(
        f"Epoch [bold]{out['epoch']}[/bold] starts {out['date']} "
        f"(timestamp {out['timestamp']})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staking-rewards",
        description="Unified CLI for the Staking Rewards Toolkit",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override SRT_LOG_LEVEL",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # rewards
    p_rw = sub.add_parser("rewards", help="Staking rewards for one or more wallets")
    p_rw.add_argument(
        "--wallet",
        type=str,
        action="append",
        required=True,
        help="Wallet address or herotag (repeatable)",
    )
    p_rw.add_argument("--provider", type=str, help="Focus on one provider")
    p_rw.add_argument(
        "--display",
        type=str,
        choices=[m.value for m in DisplayMode],
        default=DisplayMode.DAILY.value,
    )
    p_rw.add_argument(
        "--granularity",
        type=int,
        choices=list(ChartConstants.GRANULARITIES),
        default=1,
    )
    p_rw.add_argument(
        "--currency",
        type=str,
        choices=[c.value for c in Currency],
        default=Currency.NATIVE.value,
    )
    p_rw.add_argument(
        "--view",
        type=str,
        choices=[v.value for v in ViewMode],
        default=ViewMode.REWARDS.value,
    )
    p_rw.add_argument("--json", action="store_true", help="Output JSON")
    p_rw.add_argument("--output", type=str, help="Output filename")
    p_rw.set_defaults(func=cmd_rewards)

    # governance
    p_gv = sub.add_parser("governance", help="Governance vote distribution")
    p_gv.add_argument(
        "--quadratic",
        action="store_true",
        help="Show the quadratic-voting simulation",
    )
    p_gv.add_argument("--json", action="store_true", help="Output JSON")
    p_gv.add_argument("--output", type=str, help="Output filename")
    p_gv.set_defaults(func=cmd_governance)

    # epoch
    p_ep = sub.add_parser("epoch", help="Convert between epochs and dates")
    group = p_ep.add_mutually_exclusive_group(required=True)
    group.add_argument("--epoch", type=int)
    group.add_argument("--date", type=str, help="YYYY-MM-DD (UTC)")
    p_ep.add_argument("--json", action="store_true", help="Output JSON")
    p_ep.add_argument("--output", type=str, help="Output filename")
    p_ep.set_defaults(func=cmd_epoch)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        set_package_level(args.log_level)
    try:
        args.func(args)
    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise


if __name__ == "__main__":
    main()
