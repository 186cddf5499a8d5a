"""Static MQTT topic tables.

Maps registers to the topics their decoded value is published on, and
register bit masks to the topics carrying the individual flags.

The post-heating target temperature (register ``0x57``) is published on
``vallox/postHeating/targetTemp`` so that the discovery sensor announced
for it receives values. This mapping extends the established
``vallox/`` topic set, in which that sensor is announced but never fed.
"""

from __future__ import annotations

from typing import Any

from valloxmqtt.device import registers as r
from valloxmqtt.models.register import RegisterEvent

DISCOVERY_PREFIX = "homeassistant"
STATUS_TOPIC = f"{DISCOVERY_PREFIX}/status"

TOPIC_IO7_RAW = "vallox/io7/raw"
TOPIC_IO7_REHEATING = "vallox/io7/reheating"

TOPIC_IO8_RAW = "vallox/io8/raw"
TOPIC_IO8_SUMMER_MODE = "vallox/io8/summerMode"
TOPIC_IO8_ERROR_RELAY = "vallox/io8/errorRelay"
TOPIC_IO8_MOTOR_IN = "vallox/io8/motorIn"
TOPIC_IO8_PREHEATING = "vallox/io8/preheating"
TOPIC_IO8_MOTOR_OUT = "vallox/io8/motorOut"
TOPIC_IO8_FIREPLACE_SWITCH = "vallox/io8/fireplaceSwitch"

TOPIC_FAN_CURRENT_SPEED = "vallox/fan/currentSpeed"
TOPIC_FAN_MAX_SPEED = "vallox/fan/max"
TOPIC_FAN_DEFAULT_SPEED = "vallox/fan/default"

TOPIC_RH_MAX = "vallox/rh/max"
TOPIC_RH1 = "vallox/rh/1"
TOPIC_RH2 = "vallox/rh/2"
TOPIC_RH_BASIC = "vallox/rh/basic"

TOPIC_CO2_CURRENT = "vallox/co2/current"
TOPIC_CO2_MAX = "vallox/co2/max"
TOPIC_CO2_SENSOR_RAW = "vallox/co2/installed/raw"
TOPIC_CO2_SENSOR1 = "vallox/co2/installed/sensor1"
TOPIC_CO2_SENSOR2 = "vallox/co2/installed/sensor2"
TOPIC_CO2_SENSOR3 = "vallox/co2/installed/sensor3"
TOPIC_CO2_SENSOR4 = "vallox/co2/installed/sensor4"

TOPIC_MESSAGE = "vallox/message/value"

TOPIC_TEMP_OUTDOOR = "vallox/temp/outdoor"
TOPIC_TEMP_EXHAUST_OUT = "vallox/temp/exhaustOut"
TOPIC_TEMP_EXHAUST_IN = "vallox/temp/exhaustIn"
TOPIC_TEMP_SUPPLY = "vallox/temp/supply"

TOPIC_FAULT_RAW = "vallox/fault/raw"
TOPIC_FAULT_SUPPLY_SENSOR = "vallox/fault/supplySensor"
TOPIC_FAULT_CO2_ALARM = "vallox/fault/CO2Alarm"
TOPIC_FAULT_OUTDOOR_SENSOR = "vallox/fault/outdoorSensor"
TOPIC_FAULT_EXHAUST_IN_SENSOR = "vallox/fault/exhaustInSensor"
TOPIC_FAULT_WATER_COIL_FREEZING = "vallox/fault/waterCoilFreezing"
TOPIC_FAULT_EXHAUST_OUT_SENSOR = "vallox/fault/exhaustOutSensor"

TOPIC_POST_HEATING_ON_TIME = "vallox/postHeating/onTime"
TOPIC_POST_HEATING_OFF_TIME = "vallox/postHeating/offTime"
TOPIC_POST_HEATING_TARGET_TEMP = "vallox/postHeating/targetTemp"

TOPIC_FLAGS2_RAW = "vallox/flags2/raw"
TOPIC_FLAGS2_CO2_HIGHER_SPEED_REQ = "vallox/flags2/CO2HigherSpeedReq"
TOPIC_FLAGS2_CO2_LOWER_SPEED_REQ = "vallox/flags2/CO2LoweSpeedReq"
TOPIC_FLAGS2_RH_LOWER_SPEED_REQ = "vallox/flags2/RHLowerSpeedReq"
TOPIC_FLAGS2_SWITCH_LOWER_SPEED_REQ = "vallox/flags2/switchLowerSpeedReq"
TOPIC_FLAGS2_CO2_ALARM = "vallox/flags2/CO2Alarm"
TOPIC_FLAGS2_CELL_FREEZE_ALARM = "vallox/flags2/cellFreezeAlarm"

TOPIC_FLAGS4_RAW = "vallox/flags4/raw"
TOPIC_FLAGS4_WATER_COIL_FREEZING = "vallox/flags4/waterCoilFreezing"
TOPIC_FLAGS4_MASTER = "vallox/flags4/master"

TOPIC_FLAGS5_RAW = "vallox/flags5/raw"
TOPIC_FLAGS5_PREHEATING_STATUS = "vallox/flags5/preheatingStatus"

TOPIC_FLAGS6_RAW = "vallox/flags6/raw"
TOPIC_FLAGS6_REMOTE_CONTROL = "vallox/flags6/remoteControl"
TOPIC_FLAGS6_FIREPLACE_SWITCH = "vallox/flags6/fireplaceSwitch"
TOPIC_FLAGS6_FIREPLACE_FUNCTION = "vallox/flags6/fireplaceFunction"

TOPIC_FIREPLACE_SWITCH_COUNTER = "vallox/fireplace/counter"

TOPIC_STATUS_RAW = "vallox/status/raw"
TOPIC_STATUS_POWER = "vallox/status/power"
TOPIC_STATUS_CO2 = "vallox/status/CO2"
TOPIC_STATUS_RH = "vallox/status/RH"
TOPIC_STATUS_POST_HEATING_KEY = "vallox/status/postHeatingKey"
TOPIC_STATUS_FILTER_GUARD = "vallox/status/filterQuard"
TOPIC_STATUS_POST_HEATING_LED = "vallox/status/postHeatingLed"
TOPIC_STATUS_FAULT = "vallox/status/fault"
TOPIC_STATUS_SERVICE = "vallox/status/service"

TOPIC_POST_HEATING_SETPOINT = "vallox/postHeating/setPointTemp"
TOPIC_PRE_HEATING_SWITCHING = "vallox/preHeating/switchingTemp"
TOPIC_SUPPLY_FAN_STOP = "vallox/supplyFan/stopTemp"
TOPIC_BYPASS_OPERATING = "vallox/bypass/operatingTemp"

TOPIC_SERVICE_REMINDER_INTERVAL = "vallox/serviceReminder/interval"
TOPIC_SERVICE_REMINDER_COUNTER = "vallox/serviceReminder/counter"

TOPIC_PROGRAM_RAW = "vallox/program/raw"
TOPIC_PROGRAM_AUTOMATIC_HUMIDITY = "vallox/program/automaticHymidity"
TOPIC_PROGRAM_FIREPLACE_SWITCH = "vallox/program/fireplaceSwitch"
TOPIC_PROGRAM_WATER = "vallox/program/water"
TOPIC_PROGRAM_CASCADE_CONTROL = "vallox/program/cascadeControl"

TOPIC_SUPPLY_FAN_CONTROL_SETPOINT = "vallox/supplyFan/controlSetpoint"
TOPIC_EXHAUST_FAN_CONTROL_SETPOINT = "vallox/exhaustFan/controlSetpoint"
TOPIC_CELL_ANTIFREEZE_HYSTERESIS = "vallox/cellAntiFreeze/hysteresis"

TOPIC_CO2_CONTROL_SETPOINT_UPPER = "vallox/co2/controlSetpoint/upper"
TOPIC_CO2_CONTROL_SETPOINT_LOWER = "vallox/co2/controlSetpoint/lower"

TOPIC_PROGRAM2_RAW = "vallox/program2/raw"
TOPIC_PROGRAM2_MAX_SPEED = "vallox/program2/maxSpeed"

#: Inbound speed-change commands.
FAN_SPEED_COMMAND_TOPIC = f"{TOPIC_FAN_CURRENT_SPEED}/set"

RAW_TOPIC_TEMPLATE = "vallox/raw/{register:x}"

TOPIC_MAP: dict[int, str] = {
    r.REGISTER_IO07: TOPIC_IO7_RAW,
    r.REGISTER_IO08: TOPIC_IO8_RAW,
    r.REGISTER_CURRENT_FAN_SPEED: TOPIC_FAN_CURRENT_SPEED,
    r.REGISTER_MAX_RH: TOPIC_RH_MAX,
    r.REGISTER_CURRENT_CO2: TOPIC_CO2_CURRENT,
    r.REGISTER_MAXIMUM_CO2: TOPIC_CO2_MAX,
    r.REGISTER_CO2_STATUS: TOPIC_CO2_SENSOR_RAW,
    r.REGISTER_MESSAGE: TOPIC_MESSAGE,
    r.REGISTER_RH1: TOPIC_RH1,
    r.REGISTER_RH2: TOPIC_RH2,
    r.REGISTER_OUTDOOR_TEMP: TOPIC_TEMP_OUTDOOR,
    r.REGISTER_EXHAUST_OUT_TEMP: TOPIC_TEMP_EXHAUST_OUT,
    r.REGISTER_EXHAUST_IN_TEMP: TOPIC_TEMP_EXHAUST_IN,
    r.REGISTER_SUPPLY_TEMP: TOPIC_TEMP_SUPPLY,
    r.REGISTER_FAULT_CODE: TOPIC_FAULT_RAW,
    r.REGISTER_POST_HEATING_ON_TIME: TOPIC_POST_HEATING_ON_TIME,
    r.REGISTER_POST_HEATING_OFF_TIME: TOPIC_POST_HEATING_OFF_TIME,
    r.REGISTER_POST_HEATING_TARGET: TOPIC_POST_HEATING_TARGET_TEMP,
    r.REGISTER_FLAGS02: TOPIC_FLAGS2_RAW,
    r.REGISTER_FLAGS04: TOPIC_FLAGS4_RAW,
    r.REGISTER_FLAGS05: TOPIC_FLAGS5_RAW,
    r.REGISTER_FLAGS06: TOPIC_FLAGS6_RAW,
    r.REGISTER_FIREPLACE_COUNTER: TOPIC_FIREPLACE_SWITCH_COUNTER,
    r.REGISTER_STATUS: TOPIC_STATUS_RAW,
    r.REGISTER_POST_HEATING_SETPOINT: TOPIC_POST_HEATING_SETPOINT,
    r.REGISTER_MAX_FAN_SPEED: TOPIC_FAN_MAX_SPEED,
    r.REGISTER_SERVICE_INTERVAL: TOPIC_SERVICE_REMINDER_INTERVAL,
    r.REGISTER_PREHEATING_TEMP: TOPIC_PRE_HEATING_SWITCHING,
    r.REGISTER_SUPPLY_FAN_STOP_TEMP: TOPIC_SUPPLY_FAN_STOP,
    r.REGISTER_DEFAULT_FAN_SPEED: TOPIC_FAN_DEFAULT_SPEED,
    r.REGISTER_PROGRAM: TOPIC_PROGRAM_RAW,
    r.REGISTER_SERVICE_COUNTER: TOPIC_SERVICE_REMINDER_COUNTER,
    r.REGISTER_BASIC_HUMIDITY: TOPIC_RH_BASIC,
    r.REGISTER_BYPASS_TEMP: TOPIC_BYPASS_OPERATING,
    r.REGISTER_SUPPLY_FAN_SETPOINT: TOPIC_SUPPLY_FAN_CONTROL_SETPOINT,
    r.REGISTER_EXHAUST_FAN_SETPOINT: TOPIC_EXHAUST_FAN_CONTROL_SETPOINT,
    r.REGISTER_ANTI_FREEZE_HYSTERESIS: TOPIC_CELL_ANTIFREEZE_HYSTERESIS,
    r.REGISTER_CO2_SETPOINT_UPPER: TOPIC_CO2_CONTROL_SETPOINT_UPPER,
    r.REGISTER_CO2_SETPOINT_LOWER: TOPIC_CO2_CONTROL_SETPOINT_LOWER,
    r.REGISTER_PROGRAM2: TOPIC_PROGRAM2_RAW,
}

TOPIC_FLAG_MAP: dict[int, dict[int, str]] = {
    r.REGISTER_IO07: {
        r.IO07_FLAG_REHEATING: TOPIC_IO7_REHEATING,
    },
    r.REGISTER_IO08: {
        r.IO08_FLAG_SUMMER_MODE: TOPIC_IO8_SUMMER_MODE,
        r.IO08_FLAG_ERROR_RELAY: TOPIC_IO8_ERROR_RELAY,
        r.IO08_FLAG_MOTOR_IN: TOPIC_IO8_MOTOR_IN,
        r.IO08_FLAG_PREHEATING: TOPIC_IO8_PREHEATING,
        r.IO08_FLAG_MOTOR_OUT: TOPIC_IO8_MOTOR_OUT,
        r.IO08_FLAG_FIREPLACE_SWITCH: TOPIC_IO8_FIREPLACE_SWITCH,
    },
    r.REGISTER_CO2_STATUS: {
        r.CO2_SENSOR_1: TOPIC_CO2_SENSOR1,
        r.CO2_SENSOR_2: TOPIC_CO2_SENSOR2,
        r.CO2_SENSOR_3: TOPIC_CO2_SENSOR3,
        r.CO2_SENSOR_4: TOPIC_CO2_SENSOR4,
    },
    r.REGISTER_FAULT_CODE: {
        r.FAULT_SUPPLY_AIR_SENSOR: TOPIC_FAULT_SUPPLY_SENSOR,
        r.FAULT_CARBON_DIOXIDE_ALARM: TOPIC_FAULT_CO2_ALARM,
        r.FAULT_OUTDOOR_SENSOR: TOPIC_FAULT_OUTDOOR_SENSOR,
        r.FAULT_EXHAUST_AIR_IN_SENSOR: TOPIC_FAULT_EXHAUST_IN_SENSOR,
        r.FAULT_WATER_COIL_FREEZING: TOPIC_FAULT_WATER_COIL_FREEZING,
        r.FAULT_EXHAUST_AIR_OUT_SENSOR: TOPIC_FAULT_EXHAUST_OUT_SENSOR,
    },
    r.REGISTER_FLAGS02: {
        r.FLAGS2_CO2_HIGHER_SPEED_REQ: TOPIC_FLAGS2_CO2_HIGHER_SPEED_REQ,
        r.FLAGS2_CO2_LOWER_SPEED_REQ: TOPIC_FLAGS2_CO2_LOWER_SPEED_REQ,
        r.FLAGS2_RH_LOWER_SPEED_REQ: TOPIC_FLAGS2_RH_LOWER_SPEED_REQ,
        r.FLAGS2_SWITCH_LOWER_SPEED_REQ: TOPIC_FLAGS2_SWITCH_LOWER_SPEED_REQ,
        r.FLAGS2_CO2_ALARM: TOPIC_FLAGS2_CO2_ALARM,
        r.FLAGS2_CELL_FREEZE_ALARM: TOPIC_FLAGS2_CELL_FREEZE_ALARM,
    },
    r.REGISTER_FLAGS04: {
        r.FLAGS4_WATER_COIL_FREEZING: TOPIC_FLAGS4_WATER_COIL_FREEZING,
        r.FLAGS4_MASTER: TOPIC_FLAGS4_MASTER,
    },
    r.REGISTER_FLAGS05: {
        r.FLAGS5_PREHEATING_STATUS: TOPIC_FLAGS5_PREHEATING_STATUS,
    },
    r.REGISTER_FLAGS06: {
        r.FLAGS6_REMOTE_CONTROL: TOPIC_FLAGS6_REMOTE_CONTROL,
        r.FLAGS6_ACTIVATE_FIREPLACE_SWITCH: TOPIC_FLAGS6_FIREPLACE_SWITCH,
        r.FLAGS6_FIREPLACE_FUNCTION: TOPIC_FLAGS6_FIREPLACE_FUNCTION,
    },
    r.REGISTER_STATUS: {
        r.STATUS_FLAG_POWER: TOPIC_STATUS_POWER,
        r.STATUS_FLAG_CO2: TOPIC_STATUS_CO2,
        r.STATUS_FLAG_RH: TOPIC_STATUS_RH,
        r.STATUS_FLAG_HEATING_MODE: TOPIC_STATUS_POST_HEATING_KEY,
        r.STATUS_FLAG_FILTER: TOPIC_STATUS_FILTER_GUARD,
        r.STATUS_FLAG_HEATING: TOPIC_STATUS_POST_HEATING_LED,
        r.STATUS_FLAG_FAULT: TOPIC_STATUS_FAULT,
        r.STATUS_FLAG_SERVICE: TOPIC_STATUS_SERVICE,
    },
    r.REGISTER_PROGRAM: {
        r.PROGRAM_FLAG_AUTOMATIC_HUMIDITY: TOPIC_PROGRAM_AUTOMATIC_HUMIDITY,
        r.PROGRAM_FLAG_BOOST_SWITCH: TOPIC_PROGRAM_FIREPLACE_SWITCH,
        r.PROGRAM_FLAG_WATER: TOPIC_PROGRAM_WATER,
        r.PROGRAM_FLAG_CASCADE_CONTROL: TOPIC_PROGRAM_CASCADE_CONTROL,
    },
    r.REGISTER_PROGRAM2: {
        r.PROGRAM2_FLAG_MAXIMUM_SPEED_LIMIT: TOPIC_PROGRAM2_MAX_SPEED,
    },
}


def format_value(value: Any) -> str:
    """Render a value as MQTT payload text (``true``/``false`` for booleans)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def raw_topic(register: int) -> str:
    return RAW_TOPIC_TEMPLATE.format(register=register)


def publications_for(event: RegisterEvent, *, enable_raw: bool = False) -> list[tuple[str, str]]:
    """Return the ``(topic, payload)`` pairs to publish for *event*.

    Order: the direct value, one boolean per mapped bit mask, then the raw
    byte when raw passthrough is enabled.
    """
    publications: list[tuple[str, str]] = []

    topic = TOPIC_MAP.get(event.register_id)
    if topic is not None:
        publications.append((topic, format_value(event.value)))

    for mask, flag_topic in TOPIC_FLAG_MAP.get(event.register_id, {}).items():
        publications.append((flag_topic, format_value(event.raw_value & mask == mask)))

    if enable_raw:
        publications.append((raw_topic(event.register_id), str(event.raw_value)))

    return publications
