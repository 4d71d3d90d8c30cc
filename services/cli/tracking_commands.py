"""
File: services/cli/tracking_commands.py

Flask CLI commands for the tracking gateway.

Provides commands to seed a demo fleet, check the Traccar connection and
list the vehicle registry with each vehicle's device mapping.

Author: Emfour Solutions
Created: 2026-09-14
"""

import asyncio
import sys

import click
from flask import current_app
from flask.cli import with_appcontext

from database import db
from models.vehicle import Vehicle
from services.vehicle_registry import VehicleRegistry

DEMO_FLEET = [
    {
        "name": "Demo Van 1",
        "license_plate": "DEMO-001",
        "traccar_device_id": 1001,
        "traccar_unique_id": "demo-imei-1001",
    },
    {
        "name": "Demo Van 2",
        "license_plate": "DEMO-002",
        "traccar_device_id": 1002,
        "traccar_unique_id": "demo-imei-1002",
    },
    {
        "name": "Demo Pool Car",
        "license_plate": "DEMO-003",
        "traccar_device_id": None,
        "traccar_unique_id": None,
    },
]


@click.group()
def tracking():
    """Tracking gateway commands."""
    pass


@tracking.command("seed-demo")
@with_appcontext
def seed_demo():
    """Create the demo fleet. Vehicles that already exist by name are skipped."""
    created = 0

    for entry in DEMO_FLEET:
        if Vehicle.query.filter_by(name=entry["name"]).first():
            click.echo(f"  = {entry['name']} already exists")
            continue

        db.session.add(Vehicle(**entry))
        created += 1
        click.echo(f"  + {entry['name']}")

    db.session.commit()
    click.echo(click.style(f"Seeded {created} demo vehicle(s)", fg="green"))


@tracking.command("test-connection")
@with_appcontext
def test_connection():
    """Check that Traccar is reachable with the configured credentials."""
    client = current_app.tracking_service.client

    click.echo(f"Testing Traccar connection at {client.base_url or 'not set'}...")
    result = asyncio.run(client.test_connection())

    if result["success"]:
        click.echo(click.style(f"✓ {result['message']}", fg="green"))
        click.echo(f"Devices visible: {result['device_count']}")
        for name in result.get("devices", []):
            click.echo(f"  - {name}")
        return

    click.echo(click.style(f"✗ {result['error']}: {result['message']}", fg="red"))
    sys.exit(1)


@tracking.command("list-vehicles")
@with_appcontext
def list_vehicles():
    """List registered vehicles and their Traccar mapping."""
    vehicles = VehicleRegistry().list_vehicles()

    if not vehicles:
        click.echo("No vehicles registered")
        return

    click.echo(click.style("Registered Vehicles", fg="blue", bold=True))
    click.echo("=" * 40)
    for vehicle in vehicles:
        if vehicle.is_mapped:
            mapping = f"device {vehicle.traccar_device_id}"
            if vehicle.traccar_unique_id:
                mapping += f" ({vehicle.traccar_unique_id})"
        else:
            mapping = click.style("not mapped", fg="yellow")
        plate = vehicle.license_plate or "-"
        click.echo(f"{vehicle.car_id:>6}  {vehicle.name:<20} {plate:<10} {mapping}")


def register_tracking_commands(app):
    """Register tracking commands with Flask app."""
    app.cli.add_command(tracking)
