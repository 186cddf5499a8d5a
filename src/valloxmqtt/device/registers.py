"""Vallox Digit register addresses and bit masks."""

from __future__ import annotations

# ------------------------------------------------------------------
# Registers
# ------------------------------------------------------------------

REGISTER_IO07 = 0x07
REGISTER_IO08 = 0x08
REGISTER_CURRENT_FAN_SPEED = 0x29
REGISTER_MAX_RH = 0x2A
REGISTER_CURRENT_CO2 = 0x2B
REGISTER_MAXIMUM_CO2 = 0x2C
REGISTER_CO2_STATUS = 0x2D
REGISTER_MESSAGE = 0x2E
REGISTER_RH1 = 0x2F
REGISTER_RH2 = 0x30
REGISTER_OUTDOOR_TEMP = 0x32
REGISTER_EXHAUST_OUT_TEMP = 0x33
REGISTER_EXHAUST_IN_TEMP = 0x34
REGISTER_SUPPLY_TEMP = 0x35
REGISTER_FAULT_CODE = 0x36
REGISTER_POST_HEATING_ON_TIME = 0x55
REGISTER_POST_HEATING_OFF_TIME = 0x56
REGISTER_POST_HEATING_TARGET = 0x57
REGISTER_FLAGS02 = 0x6D
REGISTER_FLAGS04 = 0x6F
REGISTER_FLAGS05 = 0x70
REGISTER_FLAGS06 = 0x71
REGISTER_FIREPLACE_COUNTER = 0x79
REGISTER_STATUS = 0xA3
REGISTER_POST_HEATING_SETPOINT = 0xA4
REGISTER_MAX_FAN_SPEED = 0xA5
REGISTER_SERVICE_INTERVAL = 0xA6
REGISTER_PREHEATING_TEMP = 0xA7
REGISTER_SUPPLY_FAN_STOP_TEMP = 0xA8
REGISTER_DEFAULT_FAN_SPEED = 0xA9
REGISTER_PROGRAM = 0xAA
REGISTER_SERVICE_COUNTER = 0xAB
REGISTER_BASIC_HUMIDITY = 0xAE
REGISTER_BYPASS_TEMP = 0xAF
REGISTER_SUPPLY_FAN_SETPOINT = 0xB0
REGISTER_EXHAUST_FAN_SETPOINT = 0xB1
REGISTER_ANTI_FREEZE_HYSTERESIS = 0xB2
REGISTER_CO2_SETPOINT_UPPER = 0xB3
REGISTER_CO2_SETPOINT_LOWER = 0xB4
REGISTER_PROGRAM2 = 0xB5

# ------------------------------------------------------------------
# Bit masks
# ------------------------------------------------------------------

IO07_FLAG_REHEATING = 0x20

IO08_FLAG_SUMMER_MODE = 0x02
IO08_FLAG_ERROR_RELAY = 0x04
IO08_FLAG_MOTOR_IN = 0x08
IO08_FLAG_PREHEATING = 0x10
IO08_FLAG_MOTOR_OUT = 0x20
IO08_FLAG_FIREPLACE_SWITCH = 0x40

CO2_SENSOR_1 = 0x02
CO2_SENSOR_2 = 0x04
CO2_SENSOR_3 = 0x08
CO2_SENSOR_4 = 0x10
CO2_SENSOR_5 = 0x20

# Fault register carries a code; the masks are matched as ``raw & mask == mask``.
FAULT_SUPPLY_AIR_SENSOR = 0x05
FAULT_CARBON_DIOXIDE_ALARM = 0x06
FAULT_OUTDOOR_SENSOR = 0x07
FAULT_EXHAUST_AIR_IN_SENSOR = 0x08
FAULT_WATER_COIL_FREEZING = 0x09
FAULT_EXHAUST_AIR_OUT_SENSOR = 0x0A

FLAGS2_CO2_HIGHER_SPEED_REQ = 0x01
FLAGS2_CO2_LOWER_SPEED_REQ = 0x02
FLAGS2_RH_LOWER_SPEED_REQ = 0x04
FLAGS2_SWITCH_LOWER_SPEED_REQ = 0x08
FLAGS2_CO2_ALARM = 0x40
FLAGS2_CELL_FREEZE_ALARM = 0x80

FLAGS4_WATER_COIL_FREEZING = 0x10
FLAGS4_MASTER = 0x80

FLAGS5_PREHEATING_STATUS = 0x80

FLAGS6_REMOTE_CONTROL = 0x10
FLAGS6_ACTIVATE_FIREPLACE_SWITCH = 0x20
FLAGS6_FIREPLACE_FUNCTION = 0x40

STATUS_FLAG_POWER = 0x01
STATUS_FLAG_CO2 = 0x02
STATUS_FLAG_RH = 0x04
STATUS_FLAG_HEATING_MODE = 0x08
STATUS_FLAG_FILTER = 0x10
STATUS_FLAG_HEATING = 0x20
STATUS_FLAG_FAULT = 0x40
STATUS_FLAG_SERVICE = 0x80

PROGRAM_FLAG_AUTOMATIC_HUMIDITY = 0x10
PROGRAM_FLAG_BOOST_SWITCH = 0x20
PROGRAM_FLAG_WATER = 0x40
PROGRAM_FLAG_CASCADE_CONTROL = 0x80

PROGRAM2_FLAG_MAXIMUM_SPEED_LIMIT = 0x01

# ------------------------------------------------------------------
# Decoding groups
# ------------------------------------------------------------------

FAN_SPEED_REGISTERS: frozenset[int] = frozenset(
    {REGISTER_CURRENT_FAN_SPEED, REGISTER_MAX_FAN_SPEED, REGISTER_DEFAULT_FAN_SPEED}
)

TEMPERATURE_REGISTERS: frozenset[int] = frozenset(
    {
        REGISTER_OUTDOOR_TEMP,
        REGISTER_EXHAUST_OUT_TEMP,
        REGISTER_EXHAUST_IN_TEMP,
        REGISTER_SUPPLY_TEMP,
        REGISTER_POST_HEATING_TARGET,
        REGISTER_POST_HEATING_SETPOINT,
        REGISTER_PREHEATING_TEMP,
        REGISTER_SUPPLY_FAN_STOP_TEMP,
        REGISTER_BYPASS_TEMP,
    }
)

HUMIDITY_REGISTERS: frozenset[int] = frozenset(
    {REGISTER_MAX_RH, REGISTER_RH1, REGISTER_RH2, REGISTER_BASIC_HUMIDITY}
)
