"""Batch provisioning of Hyper-V VMs from a sysprep'd base disk image."""

__version__ = '0.1.0'
