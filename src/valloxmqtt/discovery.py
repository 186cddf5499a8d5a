"""Home Assistant MQTT discovery catalog.

The catalog is static: one descriptor per monitored quantity, all sharing
the same device block. Announcing it again is always safe.
"""

from __future__ import annotations

from valloxmqtt import topics as t
from valloxmqtt.config import DeviceIdentity
from valloxmqtt.models.discovery import Component, DiscoveryDescriptor, DiscoveryDevice

_PAYLOAD_ON = "true"
_PAYLOAD_OFF = "false"

# (unique_id, name, state_topic, device_class)
_BINARY_SENSORS: tuple[tuple[str, str, str, str | None], ...] = (
    ("vallox_io7_reheating", "Jälkilämmitys", t.TOPIC_IO7_REHEATING, "heat"),
    ("vallox_io8_summer_mode", "Peltimoottorin asento (kesä)", t.TOPIC_IO8_SUMMER_MODE, None),
    ("vallox_io8_error_relay", "Vikatietorele", t.TOPIC_IO8_ERROR_RELAY, None),
    ("vallox_io8_flag_motor_in", "Tulopuhallin", t.TOPIC_IO8_MOTOR_IN, None),
    ("vallox_io8_preheating", "Etulämmitys", t.TOPIC_IO8_PREHEATING, "heat"),
    ("vallox_io8_motor_out", "Poistopuhallin", t.TOPIC_IO8_MOTOR_OUT, None),
    ("vallox_io8_fireplace_switch", "Takka/tehostuskytkin", t.TOPIC_IO8_FIREPLACE_SWITCH, None),
    ("vallox_status_power", "Virtanäppäin", t.TOPIC_STATUS_POWER, "plug"),
    ("vallox_co2_status_1", "CO2 anturi 1", t.TOPIC_CO2_SENSOR1, None),
    ("vallox_co2_status_2", "CO2 anturi 2", t.TOPIC_CO2_SENSOR2, None),
    ("vallox_co2_status_3", "CO2 anturi 3", t.TOPIC_CO2_SENSOR3, None),
    ("vallox_co2_status_4", "CO2 anturi 4", t.TOPIC_CO2_SENSOR4, None),
    ("vallox_fault_supply_sensor", "Tuloilma-anturivika", t.TOPIC_FAULT_SUPPLY_SENSOR, "problem"),
    ("vallox_fault_co2_alarm", "Hiilidioksidihälytys", t.TOPIC_FAULT_CO2_ALARM, "problem"),
    ("vallox_fault_outdoor_sensor", "Ulkoilma-anturivika", t.TOPIC_FAULT_OUTDOOR_SENSOR, "problem"),
    ("vallox_fault_exhaust_in", "Poistoilma-anturivika", t.TOPIC_FAULT_EXHAUST_IN_SENSOR, "problem"),
    (
        "vallox_fault_water_coil_freezing",
        "Vesipatterin jäätymisvaara",
        t.TOPIC_FAULT_WATER_COIL_FREEZING,
        "problem",
    ),
    ("vallox_fault_exhaust_out", "Jäteilma-anturivika", t.TOPIC_FAULT_EXHAUST_OUT_SENSOR, "problem"),
    (
        "vallox_flags2_co2_higher_speed_req",
        "CO2 suurempi nopeus -pyyntö",
        t.TOPIC_FLAGS2_CO2_HIGHER_SPEED_REQ,
        None,
    ),
    (
        "vallox_flags2_co2_lower_speed_req",
        "CO2 pienempi nopeus -pyyntö",
        t.TOPIC_FLAGS2_CO2_LOWER_SPEED_REQ,
        None,
    ),
    (
        "vallox_flags2_rh_lower_speed_req",
        "%RH pienempi nopeus -pyyntö",
        t.TOPIC_FLAGS2_RH_LOWER_SPEED_REQ,
        None,
    ),
    (
        "vallox_flags2_switch_lower_speed_req",
        "Kytkin pien. nop. -pyyntö",
        t.TOPIC_FLAGS2_SWITCH_LOWER_SPEED_REQ,
        None,
    ),
    ("vallox_flags2_co2_alarm", "CO2 -hälytys", t.TOPIC_FLAGS2_CO2_ALARM, "problem"),
    ("vallox_flags2_cell_freeze_alarm", "Kennon jäätymishälytys", t.TOPIC_FLAGS2_CELL_FREEZE_ALARM, "problem"),
    (
        "vallox_flags4_water_coil_freezing_alert",
        "Vesipatterin jäätymisvaara",
        t.TOPIC_FLAGS4_WATER_COIL_FREEZING,
        "problem",
    ),
    ("vallox_flags4_master", "slave(false)/master(true) valinta", t.TOPIC_FLAGS4_MASTER, None),
    ("vallox_flags5_preheating_status", "Etulämmityksen tilalippu", t.TOPIC_FLAGS5_PREHEATING_STATUS, None),
    ("vallox_flags6_remote_control", "Kaukovalvontaohjaus", t.TOPIC_FLAGS6_REMOTE_CONTROL, None),
    (
        "vallox_flags6_fireplace_switch_activation",
        "Takkakykimen aktivointi",
        t.TOPIC_FLAGS6_FIREPLACE_SWITCH,
        None,
    ),
    (
        "vallox_flags6_fireplace_function_state",
        "Takka/tehostustoiminto",
        t.TOPIC_FLAGS6_FIREPLACE_FUNCTION,
        None,
    ),
    ("vallox_status_co2_key", "CO2 -näppäin", t.TOPIC_STATUS_CO2, None),
    ("vallox_status_rh_key", "%RH -näppäin", t.TOPIC_STATUS_RH, None),
    ("vallox_status_post_heating_key", "Jälkilämmityksen näppäin", t.TOPIC_STATUS_POST_HEATING_KEY, None),
    ("vallox_status_filter_guard_led", "Suodatinvahdin merkkivalo", t.TOPIC_STATUS_FILTER_GUARD, None),
    ("vallox_status_post_heating_led", "Jälkilämmityksen merkkivalo", t.TOPIC_STATUS_POST_HEATING_LED, None),
    ("vallox_status_fault_led", "Vian merkkivalo", t.TOPIC_STATUS_FAULT, None),
    ("vallox_status_service_reminder", "Huoltomuistutin", t.TOPIC_STATUS_SERVICE, None),
    (
        "vallox_program_automatic_humidity",
        "Kosteustason automaattihaku",
        t.TOPIC_PROGRAM_AUTOMATIC_HUMIDITY,
        None,
    ),
    (
        "vallox_program_fireplace_switch",
        "tehostus(on)/takkakytkimen(off) tila",
        t.TOPIC_PROGRAM_FIREPLACE_SWITCH,
        None,
    ),
    ("vallox_program_water", "Vesi(on)/sähköpatterimalli(off)", t.TOPIC_PROGRAM_WATER, None),
    ("vallox_program_cascade_control", "Kaskadisäätö", t.TOPIC_PROGRAM_CASCADE_CONTROL, None),
    ("vallox_program2_max_speed", "Maksiminopeuden rajoitus", t.TOPIC_PROGRAM2_MAX_SPEED, None),
)

# (unique_id, name, state_topic, device_class, icon)
_SENSORS: tuple[tuple[str, str, str, str | None, str | None], ...] = (
    ("vallox_rh_max", "Nykyinen maksimi ilmankosteus", t.TOPIC_RH_MAX, "humidity", None),
    ("vallox_message", "Milliampeeri-/jänniteviesti", t.TOPIC_MESSAGE, None, None),
    ("vallox_rh_1", "%RH #1", t.TOPIC_RH1, "humidity", None),
    ("vallox_rh_2", "%RH #2", t.TOPIC_RH2, "humidity", None),
    ("vallox_temp_outdoor", "Ulkolämpötila", t.TOPIC_TEMP_OUTDOOR, "temperature", None),
    ("vallox_temp_exhaust_out", "Jäteilman lämpötila", t.TOPIC_TEMP_EXHAUST_OUT, "temperature", None),
    ("vallox_temp_exhaust_in", "Poistoilman lämpötila", t.TOPIC_TEMP_EXHAUST_IN, "temperature", None),
    ("vallox_temp_supply", "Tuloilman lämpötila", t.TOPIC_TEMP_SUPPLY, "temperature", None),
    ("vallox_post_heating_on_time", "Jälilämmityksen ON-laskuri", t.TOPIC_POST_HEATING_ON_TIME, None, None),
    ("vallox_post_heating_off_time", "Jälkilämmityksen OFF-aika", t.TOPIC_POST_HEATING_OFF_TIME, None, None),
    (
        "vallox_post_heating_target_temp",
        "Jäkilämmityksen kohdearvo",
        t.TOPIC_POST_HEATING_TARGET_TEMP,
        None,
        None,
    ),
    (
        "vallox_fireplace_switch_counter",
        "Takka/tehostuskytkimen laskuri",
        t.TOPIC_FIREPLACE_SWITCH_COUNTER,
        None,
        None,
    ),
    ("vallox_post_heating_set_point", "Jälkilämmityksen asetusarvo", t.TOPIC_POST_HEATING_SETPOINT, None, None),
    ("vallox_max_fan_speed", "Maksimipuhallinnopeus", t.TOPIC_FAN_MAX_SPEED, None, "mdi:fan"),
    (
        "vallox_service_reminder_interval",
        "Huoltomuistuttimen aikaväli",
        t.TOPIC_SERVICE_REMINDER_INTERVAL,
        "duration",
        None,
    ),
    (
        "vallox_pre_heating_switching",
        "Etulämmityksen kytkentälämpötila",
        t.TOPIC_PRE_HEATING_SWITCHING,
        "temperature",
        None,
    ),
    ("vallox_default_fan_speed", "Peruspuhallinnopeus", t.TOPIC_FAN_DEFAULT_SPEED, None, "mdi:fan"),
    (
        "vallox_service_reminder_counter",
        "Huoltomuistuttimen kuukausilaskuri",
        t.TOPIC_SERVICE_REMINDER_COUNTER,
        None,
        None,
    ),
    ("vallox_rh_base", "Peruskosteustaso", t.TOPIC_RH_BASIC, None, None),
    (
        "vallox_cell_bypass_temp",
        "Kennonohituksen toimintalämpötila",
        t.TOPIC_BYPASS_OPERATING,
        "temperature",
        None,
    ),
    (
        "vallox_supply_fan_control_setpoint",
        "Tasaviratuloilmapuhaltimen säädön asetusarvo",
        t.TOPIC_SUPPLY_FAN_CONTROL_SETPOINT,
        None,
        None,
    ),
    (
        "vallox_exhaust_fan_control_setpoint",
        "Tasavirtapoistoilmapuhaltimen säädön asetusarvo",
        t.TOPIC_EXHAUST_FAN_CONTROL_SETPOINT,
        None,
        None,
    ),
    (
        "vallox_cell_antifreeze_hysteresis",
        "Kennon jäätymiseneston lämpötilojen hystereesi",
        t.TOPIC_CELL_ANTIFREEZE_HYSTERESIS,
        None,
        None,
    ),
)


def build_catalog(identity: DeviceIdentity | None = None) -> tuple[DiscoveryDescriptor, ...]:
    """Build the full descriptor catalog for *identity*."""
    device = DiscoveryDevice.from_identity(identity or DeviceIdentity())

    descriptors: list[DiscoveryDescriptor] = [
        DiscoveryDescriptor(
            component=Component.BINARY_SENSOR,
            unique_id=unique_id,
            name=name,
            device=device,
            state_topic=state_topic,
            device_class=device_class,
            payload_on=_PAYLOAD_ON,
            payload_off=_PAYLOAD_OFF,
        )
        for unique_id, name, state_topic, device_class in _BINARY_SENSORS
    ]
    descriptors.extend(
        DiscoveryDescriptor(
            component=Component.SENSOR,
            unique_id=unique_id,
            name=name,
            device=device,
            state_topic=state_topic,
            device_class=device_class,
            icon=icon,
        )
        for unique_id, name, state_topic, device_class, icon in _SENSORS
    )
    descriptors.append(
        DiscoveryDescriptor(
            component=Component.NUMBER,
            unique_id="vallox_current_fan_speed",
            name="Nykyinen puhallinnopeus",
            device=device,
            icon="mdi:fan",
            state_topic=t.TOPIC_FAN_CURRENT_SPEED,
            command_topic=t.FAN_SPEED_COMMAND_TOPIC,
            min=1,
            max=8,
            mode="slider",
        )
    )
    return tuple(descriptors)


def discovery_messages(
    catalog: tuple[DiscoveryDescriptor, ...],
    *,
    prefix: str = t.DISCOVERY_PREFIX,
) -> list[tuple[str, bytes]]:
    """Serialize *catalog* into ``(config_topic, json_payload)`` pairs."""
    return [(descriptor.config_topic(prefix), descriptor.to_payload()) for descriptor in catalog]
