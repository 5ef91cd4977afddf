# routers/__init__.py
from . import dashboard, leases, maintenance, payments, properties, tenants, units, users

all_routers = [
     properties.router,
     units.router,
     tenants.router,
     leases.router,
     payments.router,
     maintenance.router,
     users.router,
     dashboard.router,
]
