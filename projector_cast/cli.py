"""
Command-line front end.

Discovers renderers and drives them from the terminal, using the Rich
library for output.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from projector_cast import control
from projector_cast.config import AddressFilter, DiscoveryConfig
from projector_cast.const import SSDP_DEFAULT_TIMEOUT
from projector_cast.device import DeviceRecord, resolve
from projector_cast.exceptions import ProjectorCastError
from projector_cast.ssdp import scan
from projector_cast.transport import format_time, parse_time
from projector_cast.wol import wake_on_lan

console = Console()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def _discovery_config(args: argparse.Namespace) -> DiscoveryConfig:
    return DiscoveryConfig(
        timeout=args.timeout,
        address_filter=AddressFilter.from_env(deny=args.deny_network, allow=args.allow_network),
        local_ip=args.local_ip,
    )


def discover_devices(args: argparse.Namespace) -> List[DeviceRecord]:
    """Runs a scan behind a spinner."""
    spinner = Spinner('dots', text=Text(f"Searching for renderers (waiting {args.timeout:.0f}s)...", style='cyan'))
    with Live(spinner, refresh_per_second=10, console=console, transient=True):
        return scan(config=_discovery_config(args))


def print_discovered_devices(devices: List[DeviceRecord]) -> None:
    """Prints the discovered devices in a rich table."""
    if not devices:
        console.print(Panel("[bold yellow]No UPnP/DLNA renderers found on the network.[/bold yellow]", border_style='yellow', expand=False))
        return

    table = Table(title="Discovered Renderers", border_style='blue', title_style='bold magenta')
    table.add_column('#', style='cyan', justify='right')
    table.add_column('Device Name', style='bold green')
    table.add_column('IP')
    table.add_column('Capabilities', style='yellow')
    table.add_column('Location', style='dim')

    for idx, device in enumerate(devices):
        capabilities = []
        if device.supports_playback:
            capabilities.append('Playback')
        if device.supports_rendering:
            capabilities.append('Volume')
        table.add_row(str(idx + 1), device.friendly_name, device.ip, ', '.join(capabilities) or '-', device.description_url)

    console.print(table)


def select_device(args: argparse.Namespace) -> Optional[DeviceRecord]:
    """Resolve the device a command targets: by --location, or by scanning and matching --ip/--name."""
    if args.location:
        return resolve(args.location)

    devices = discover_devices(args)
    if args.ip:
        devices = [d for d in devices if d.ip == args.ip]
    if args.name:
        devices = [d for d in devices if args.name.lower() in d.friendly_name.lower()]

    if not devices:
        print_discovered_devices(devices)
        return None
    if len(devices) == 1:
        return devices[0]

    print_discovered_devices(devices)
    choice = console.input("[bold]Select a device by number: [/]")
    try:
        selection = int(choice) - 1
    except ValueError:
        selection = -1
    if not 0 <= selection < len(devices):
        console.print("[bold red]Invalid selection.[/bold red]")
        return None
    return devices[selection]


# --- Commands ---
def cmd_scan(args: argparse.Namespace) -> int:
    print_discovered_devices(discover_devices(args))
    return 0


def cmd_wake(args: argparse.Namespace) -> int:
    wake_on_lan(args.mac)
    console.print(f"[bold green]✔ Magic packet sent to [cyan]{args.mac}[/].[/bold green]")
    return 0


def cmd_cast(device: DeviceRecord, args: argparse.Namespace) -> None:
    control.cast_video(device, args.url)
    console.print(f"[bold green]✔ Casting to [cyan]{device.friendly_name}[/].[/bold green]")


def cmd_seek(device: DeviceRecord, args: argparse.Namespace) -> None:
    target = args.target if ':' in args.target else format_time(int(args.target))
    control.seek(device, target)
    console.print(f"Seeked to [bold]{target}[/].")


def cmd_volume(device: DeviceRecord, args: argparse.Namespace) -> None:
    if args.level is not None:
        control.set_volume(device, args.level)
    console.print(f"Volume: [bold magenta]{control.get_volume(device)}[/]")


def cmd_mute(device: DeviceRecord, args: argparse.Namespace) -> None:
    control.set_mute(device, args.state == 'on')
    console.print(f"Mute: [bold]{'on' if control.get_mute(device) else 'off'}[/]")


def cmd_status(device: DeviceRecord, args: argparse.Namespace) -> None:
    state = control.get_transport_info(device)
    current, total = control.get_position_info(device)
    lines = [
        f"[bold]Device:[/] [cyan]{device.friendly_name}[/] ({device.ip})",
        f"[bold]State:[/] {state.value}",
        f"[bold]Position:[/] {current} / {total} ({parse_time(current)}s of {parse_time(total)}s)",
    ]
    if device.supports_rendering:
        lines.append(f"[bold]Volume:[/] {control.get_volume(device)}")
    console.print(Panel(Text.from_markup('\n'.join(lines)), title="Renderer Status", border_style='green', expand=False))


def _simple(name: str):
    def run(device: DeviceRecord, args: argparse.Namespace) -> None:
        getattr(control, name)(device)
        console.print(f"[bold green]✔ {name.capitalize()} sent to [cyan]{device.friendly_name}[/].[/bold green]")
    return run


DEVICE_COMMANDS = {
    'cast': cmd_cast,
    'play': _simple('play'),
    'pause': _simple('pause'),
    'stop': _simple('stop'),
    'seek': cmd_seek,
    'volume': cmd_volume,
    'mute': cmd_mute,
    'status': cmd_status,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='projector-cast', description="Discover and control UPnP/DLNA renderers.")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    parser.add_argument('-t', '--timeout', type=float, default=SSDP_DEFAULT_TIMEOUT, help="Discovery window in seconds")
    parser.add_argument('--local-ip', help="LAN address to discover from (skips detection)")
    parser.add_argument('--deny-network', action='append', default=[], metavar='CIDR', help="Extra network to never use as LAN address")
    parser.add_argument('--allow-network', action='append', default=[], metavar='CIDR', help="Extra network to accept as LAN address")

    target = argparse.ArgumentParser(add_help=False)
    target.add_argument('--location', help="Description URL of the device (skips discovery)")
    target.add_argument('--ip', help="Pick the discovered device with this IP")
    target.add_argument('--name', help="Pick the discovered device whose name contains this text")

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('scan', help="List renderers on the network")
    wake = sub.add_parser('wake', help="Send a Wake-on-LAN packet")
    wake.add_argument('mac', help="MAC address, e.g. AA:BB:CC:DD:EE:FF")

    sub.add_parser('cast', parents=[target], help="Play a media URL").add_argument('url')
    for name in ('play', 'pause', 'stop', 'status'):
        sub.add_parser(name, parents=[target], help=f"{name.capitalize()} playback" if name != 'status' else "Show playback status")
    sub.add_parser('seek', parents=[target], help="Seek to HH:MM:SS or seconds").add_argument('target')
    sub.add_parser('volume', parents=[target], help="Show or set the volume").add_argument('level', type=int, nargs='?')
    sub.add_parser('mute', parents=[target], help="Mute or unmute").add_argument('state', choices=('on', 'off'))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run one command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == 'scan':
            return cmd_scan(args)
        if args.command == 'wake':
            return cmd_wake(args)

        device = select_device(args)
        if device is None:
            return 1
        DEVICE_COMMANDS[args.command](device, args)
        return 0
    except (ProjectorCastError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        return 130


if __name__ == '__main__':
    sys.exit(main())
