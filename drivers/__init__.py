"""
drivers/
Drivers de probe executados pelo worker de discovery.

Cada driver concreto herda de core.base_driver.NetworkDeviceDriver.

Implementados:
- ssh_driver.py     (SSH genérico via Netmiko, com autodetecção)
- probe_worker.py   (entrypoint do processo worker)
"""

from .ssh_driver import SSHProbeDriver

__all__ = ["SSHProbeDriver"]
