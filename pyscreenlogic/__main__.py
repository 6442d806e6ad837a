# pyScreenLogic Module - Command Line Tool
# -*- coding: utf-8 -*-
"""
 Python module to interface with Pentair ScreenLogic pool and spa gateways

 For more information see README.md

 Command Line:
    python -m pyscreenlogic <discover|version|status|config|history|set>

 Defaults for the connection flags come from the environment or a .env file:
    SL_HOST, SL_PORT, SL_CLIENT_NAME, SL_TIMEOUT, SL_CACHE_EXPIRE
"""

import argparse
import json
import os
import sys
from datetime import datetime

import dotenv
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

# Modules
from pyscreenlogic import version, set_debug

# Load .env file if present
dotenv.load_dotenv()

# Global Variables
host = os.getenv("SL_HOST", None) or None
port = int(os.getenv("SL_PORT", "80"))
client_name = os.getenv("SL_CLIENT_NAME", "pyscreenlogic")
timeout = float(os.getenv("SL_TIMEOUT", "10"))
cacheexpire = int(os.getenv("SL_CACHE_EXPIRE", "60"))
discovery_timeout = 5.0

HEAT_MODES = {
    'off': 'OFF',
    'solar': 'SOLAR_ONLY',
    'solar_preferred': 'SOLAR_PREFERRED',
    'heat': 'ON',
}

# Setup parser and groups
p = argparse.ArgumentParser(prog="pyScreenLogic", description=f"pyScreenLogic Module v{version}")
subparsers = p.add_subparsers(dest="command", title='commands (run <command> -h to see usage information)',
                              required=True)

discover_args = subparsers.add_parser("discover", help='Discover a ScreenLogic gateway on the local network')
discover_args.add_argument("-timeout", type=float, default=discovery_timeout,
                           help=f"Seconds to wait for an answer [Default={discovery_timeout:.1f}]")

version_args = subparsers.add_parser("version", help='Print module and gateway firmware version')

status_args = subparsers.add_parser("status", help='Get pool and spa status')
status_args.add_argument("-format", type=str, default="text", help="Output format: text or json")
status_args.add_argument("-fahrenheit", action="store_true", default=False,
                         help="Report temperatures in Fahrenheit [Default=Celsius]")

config_args = subparsers.add_parser("config", help='Get controller configuration')
config_args.add_argument("-format", type=str, default="text", help="Output format: text or json")

history_args = subparsers.add_parser("history", help='Get outside and pool water temperature history')
history_args.add_argument("-start", type=str, default=None,
                          help="Start time in ISO 8601 format [Default=24 hours ago]")
history_args.add_argument("-end", type=str, default=None, help="End time in ISO 8601 format [Default=now]")
history_args.add_argument("-format", type=str, default="text", help="Output format: text or json")

set_args = subparsers.add_parser("set", help='Set heat set-point or heat mode')
set_args.add_argument("-body", type=str, default="pool", help="Body of water: pool or spa [Default=pool]")
set_args.add_argument("-temp", type=int, default=None, help="Heat set-point in the controller's unit")
set_args.add_argument("-mode", type=str, default=None,
                      help="Heat mode: off, solar, solar_preferred or heat")

# Connection flags shared by every command
p.add_argument("-host", type=str, default=host, help="IP address of the gateway [Default=discover]")
p.add_argument("-port", type=int, default=port, help=f"TCP port of the gateway [Default={port}]")
p.add_argument("-name", type=str, default=client_name, help=f"Client name [Default={client_name}]")
p.add_argument("-debug", action="store_true", default=False, help="Enable debug output")

if len(sys.argv) == 1:
    p.print_help(sys.stderr)
    sys.exit(1)

# parse args
args = p.parse_args()
command = args.command

# Set Debug Mode
if args.debug:
    set_debug(True)


def connect():
    import pyscreenlogic
    try:
        return pyscreenlogic.ScreenLogic(client_name=args.name, host=args.host, port=args.port,
                                         timeout=timeout, cacheexpire=cacheexpire)
    except (OSError, pyscreenlogic.PyScreenLogicException) as exc:
        print(f"ERROR: Unable to connect to gateway: {exc}")
        sys.exit(1)


def print_output(output, fmt):
    if fmt == 'json':
        print(json.dumps(output, indent=2, default=str))
    else:
        # Table Output
        for item in output:
            name = item.replace("_", " ").title()
            print("  {:<22}{}".format(name, output[item]))
        print("")


# Run Discovery
if command == 'discover':
    from pyscreenlogic import discover_gateway, display_name

    print("pyScreenLogic [%s] - Discovery\n" % version)
    try:
        gw = discover_gateway(timeout=args.timeout)
    except OSError as exc:
        print(f"ERROR: No gateway answered: {exc}")
        sys.exit(1)
    print_output({
        'name': gw.name,
        'display_name': display_name(gw.name),
        'address': gw.address,
        'port': gw.port,
        'gateway_type': gw.gateway_type,
        'subnet': gw.subnet,
    }, "text")

# Print Version
elif command == 'version':
    print("pyScreenLogic [%s]" % version)
    sl = connect()
    print(f"  Gateway {sl.gateway_name()} firmware {sl.gateway_version()}")
    sl.close()

# Get Status
elif command == 'status':
    from pyscreenlogic import BodyOfWater, TemperatureUnit

    sl = connect()
    unit = TemperatureUnit.FAHRENHEIT if args.fahrenheit else TemperatureUnit.CELSIUS
    if args.format == 'text':
        print(f"pyScreenLogic [{version}] - Status of {sl.gateway_name()}\n")
    status = sl.pool_status()
    output = {
        'gateway': sl.gateway_name(),
        'ready': status.is_ready(),
        'freeze_mode': status.payload.freeze_mode,
        'air_temp': sl.air_temp(unit),
    }
    for body in BodyOfWater:
        prefix = body.name.lower()
        if status.body(body) is None:
            continue
        output[f'{prefix}_temp'] = sl.current_temp(body, unit)
        output[f'{prefix}_set_point'] = sl.heating_threshold_temp(body, unit)
        heat_mode = status.heat_mode(body)
        output[f'{prefix}_heat_mode'] = heat_mode.name if heat_mode is not None else None
        output[f'{prefix}_heating'] = sl.current_heating_state(body)
    chem = status.chemistry
    output.update({'ph': chem.ph, 'orp': chem.orp, 'salt_ppm': chem.salt_ppm})
    print_output(output, args.format)
    sl.close()

# Get Controller Configuration
elif command == 'config':
    from pyscreenlogic import BodyOfWater

    sl = connect()
    if args.format == 'text':
        print(f"pyScreenLogic [{version}] - Controller Configuration of {sl.gateway_name()}\n")
    config = sl.controller_config()
    output = {
        'controller_type': config.controller_type,
        'hardware_type': config.hardware_type,
        'temperature_unit': config.temperature_unit.name,
        'pool_set_point_range': sl.set_point_range(BodyOfWater.POOL, config.temperature_unit),
        'spa_set_point_range': sl.set_point_range(BodyOfWater.SPA, config.temperature_unit),
        'has_solar': config.has_solar(),
        'has_chlorinator': config.has_chlorinator(),
        'has_cooling': config.has_cooling(),
        'has_intellichem': config.has_intellichem(),
        'circuits': [c.name for c in config.circuits],
    }
    print_output(output, args.format)
    sl.close()

# Get History
elif command == 'history':
    end = isoparse(args.end) if args.end else datetime.now()
    start = isoparse(args.start) if args.start else end - relativedelta(days=1)
    sl = connect()
    if args.format == 'text':
        print(f"pyScreenLogic [{version}] - History from {start} to {end}\n")
    data = sl.history(start, end)
    output = {
        'outside_temps': [(e.timestamp.isoformat(), e.temperature) for e in data.outside_temps],
        'pool_water_temps': [(e.timestamp.isoformat(), e.temperature) for e in data.pool_water_temps],
    }
    if args.format == 'json':
        print_output(output, 'json')
    else:
        for name, events in output.items():
            print(f"  {name.replace('_', ' ').title()}")
            for timestamp, temperature in events:
                print(f"    {timestamp}  {temperature}")
        print("")
    sl.close()

# Set Heat Point or Mode
elif command == 'set':
    from pyscreenlogic import BodyOfWater, HeatMode

    # If no arguments, print usage
    if args.temp is None and not args.mode:
        print("usage: pyscreenlogic set [-h] [-body BODY] [-temp TEMP] [-mode MODE]")
        sys.exit(1)
    body_name = args.body.lower()
    if body_name not in ['pool', 'spa']:
        print("ERROR: Invalid Body [%s] - must be pool or spa" % body_name)
        sys.exit(1)
    body = BodyOfWater[body_name.upper()]
    mode = None
    if args.mode:
        mode_name = args.mode.lower()
        if mode_name not in HEAT_MODES:
            print("ERROR: Invalid Mode [%s] - must be one of %s" % (mode_name, ", ".join(HEAT_MODES)))
            sys.exit(1)
        mode = HeatMode[HEAT_MODES[mode_name]]
    sl = connect()
    print(f"pyScreenLogic [{version}] - Set {body_name} on {sl.gateway_name()}\n")
    if args.temp is not None:
        unit = sl.temperature_unit()
        try:
            sl.set_heating_threshold_temp(body, args.temp, unit)
        except ValueError as exc:
            print(f"ERROR: {exc}")
            sys.exit(1)
        print("Setting %s heat set-point to %s" % (body_name, args.temp))
    if mode is not None:
        sl.set_heat_mode(body, mode)
        print("Setting %s heat mode to %s" % (body_name, args.mode.lower()))
    sl.close()

# Print Usage
else:
    p.print_help()
