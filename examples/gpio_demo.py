"""Exercise a BLEIO peripheral: outputs, PWM, inputs, ADC and LED chains.

Usage:
    uv run python examples/gpio_demo.py
    uv run python examples/gpio_demo.py --address AA:BB:CC:DD:EE:FF --led-pin 18
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from bleio import (
    AdcAttenuation,
    BleioDevice,
    BleioError,
    DisconnectBehavior,
    FeatureUnavailableError,
    InputConfig,
    OutputKind,
    PwmFrequency,
    SerialLedPattern,
)


async def run(name: str, address: str | None, led_pin: int, adc_pin: int, input_pin: int) -> None:
    """Run the demo sequence against one device."""
    async with BleioDevice(name=name, address=address) as device:
        caps = device.capabilities
        print(f"Connected: adc={caps.adc} read_protocol={caps.read_protocol.name}")

        # Blink GPIO2 by hand, then let the firmware do it
        for _ in range(3):
            await device.set_output(2, OutputKind.HIGH)
            await asyncio.sleep(0.5)
            await device.set_output(2, OutputKind.LOW)
            await asyncio.sleep(0.5)
        await device.set_output(2, OutputKind.BLINK_250MS)
        await asyncio.sleep(3)

        for duty in (0.25, 0.5, 0.75, 1.0):
            await device.set_pwm(2, duty, PwmFrequency.FREQ_10KHZ)
            print(f"PWM duty {duty:.0%}")
            await asyncio.sleep(1)
        await device.set_output(2, OutputKind.LOW)

        await device.set_input(input_pin, InputConfig.FLOATING)
        state = await device.read_input(input_pin)
        print(f"GPIO{input_pin}: {'not an input' if state is None else ('HIGH' if state else 'LOW')}")

        if caps.adc:
            await device.enable_adc(adc_pin, AdcAttenuation.ATTEN_11DB)
            await asyncio.sleep(0.5)
            reading = await device.read_adc(adc_pin)
            if reading is None:
                print(f"GPIO{adc_pin} is not in ADC mode")
            else:
                print(f"GPIO{reading.pin}: raw={reading.raw_value} voltage={reading.voltage:.3f}V")
            await device.disable_adc(adc_pin)

        await device.set_disconnect_behavior(2, DisconnectBehavior.SET_LOW)

        await device.enable_serial_led(led_pin, 2, 64)
        await device.set_serial_led_color(led_pin, 1, 255, 0, 0)
        await device.set_serial_led_color(led_pin, 2, 0, 0, 255)
        await asyncio.sleep(2)
        await device.set_serial_led_pattern(led_pin, 1, SerialLedPattern.RAINBOW, 12, 128)
        await device.set_serial_led_pattern(led_pin, 2, SerialLedPattern.FLICKER, 128, 128)
        await asyncio.sleep(5)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive the GPIO pins of a BLEIO device.")
    parser.add_argument("--name", default="BLEIO", help="Advertised device name. Default: BLEIO")
    parser.add_argument("--address", help="Device MAC address (overrides --name).")
    parser.add_argument("--led-pin", type=int, default=18, help="LED chain data pin. Default: 18")
    parser.add_argument("--adc-pin", type=int, default=32, help="ADC input pin. Default: 32")
    parser.add_argument("--input-pin", type=int, default=34, help="Digital input pin. Default: 34")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        asyncio.run(run(args.name, args.address, args.led_pin, args.adc_pin, args.input_pin))
    except FeatureUnavailableError as err:
        print(f"Not supported by this firmware: {err}")
    except BleioError as err:
        print(f"Error: {err}")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
