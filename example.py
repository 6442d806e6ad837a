# Example: pyScreenLogic Usage Demo
# ---------------------------------
# This script demonstrates how to read and control a Pentair ScreenLogic
# pool and spa gateway using the pyScreenLogic library.
#
# Usage:
#   - Leave SL_HOST unset to discover the gateway on the local network, or use
#     a .env file with the following variables:
#       SL_HOST, SL_PORT, SL_CLIENT_NAME
#   - Run: python example.py

import os

import dotenv

import pyscreenlogic
from pyscreenlogic import BodyOfWater, TemperatureUnit

# Load environment variables from .env file if present
dotenv.load_dotenv()

# Enable debug logging for more verbose output (optional for learning)
# pyscreenlogic.set_debug(True)

host = os.getenv('SL_HOST', None) or None
port = int(os.getenv('SL_PORT', '80'))
client_name = os.getenv('SL_CLIENT_NAME', 'pyscreenlogic')

# Connect to gateway - discovered when no host is given
print("Connecting to ScreenLogic gateway %s..." % (host or "(discovery)"))
sl = pyscreenlogic.ScreenLogic(client_name=client_name, host=host, port=port, timeout=10)

# --- Gateway Info ---
print("Gateway: %s (%s) - Firmware: %s\n" % (sl.gateway_name(), pyscreenlogic.display_name(sl.gateway_name()),
                                             sl.gateway_version()))

# --- Temperatures ---
unit = sl.temperature_unit()
print("Controller unit: %s" % unit.name.title())
print("Air Temperature: %sC" % sl.air_temp(TemperatureUnit.CELSIUS))
print("Pool Temperature: %sC" % sl.pool_temp())
print("Spa Temperature: %sC" % sl.spa_temp())
print("")

# --- Heaters ---
for body in BodyOfWater:
    print("%s heater: active=%s current=%s target=%s set-point=%sC range=%r" % (
        body.name.title(),
        sl.heater_active(body),
        sl.current_heating_state(body),
        sl.target_heating_state(body),
        sl.heating_threshold_temp(body),
        sl.set_point_range(body)))
print("")

# --- Chemistry ---
chem = sl.pool_status().chemistry
print("pH: %0.2f - ORP: %0.0f - Salt: %d ppm" % (chem.ph, chem.orp, chem.salt_ppm))

# --- Raw Payloads ---
print("Controller configuration: %r\n" % sl.controller_config().payload)
print("Pool status: %r\n" % sl.pool_status().payload)

# --- Change Settings ---
# Uncomment below to set the spa set-point to 38C and turn its heater on:
# sl.set_spa_heating_threshold_temp(38)
# sl.set_heat_mode(BodyOfWater.SPA, pyscreenlogic.HeatMode.ON)

sl.close()
