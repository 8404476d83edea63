from decimal import Decimal

from django.contrib.auth.models import User

from ..choices import UnitOfMeasurement
from ..models import Client, FinishedGood, RawMaterial, TradingGood, Vendor


def create_user(username: str, password: str = "pw"):
    return User.objects.create_user(username=username, password=password)


def create_client(user, name="Acme Traders", email=None, **extra):
    return Client.objects.create(
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        created_by=user,
        **extra,
    )


def create_vendor(user, name="Supply Co", email=None, **extra):
    return Vendor.objects.create(
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        created_by=user,
        **extra,
    )


def create_trading_good(user, name="Steel Bolt", stock="10", cost="5.00", price="10.00", **extra):
    return TradingGood.objects.create(
        name=name,
        unit=UnitOfMeasurement.PIECE,
        current_stock=Decimal(stock),
        cost_price=Decimal(cost),
        selling_price=Decimal(price),
        created_by=user,
        **extra,
    )


def create_raw_material(user, name="Copper Wire", stock="0", cost="0.00", reorder="5", **extra):
    return RawMaterial.objects.create(
        name=name,
        unit=UnitOfMeasurement.KG,
        current_stock=Decimal(stock),
        cost_price=Decimal(cost),
        reorder_level=Decimal(reorder),
        created_by=user,
        **extra,
    )


def create_finished_good(user, name="Motor", stock="4", price="900.00", **extra):
    return FinishedGood.objects.create(
        name=name,
        unit=UnitOfMeasurement.PIECE,
        current_stock=Decimal(stock),
        selling_price=Decimal(price),
        created_by=user,
        **extra,
    )
