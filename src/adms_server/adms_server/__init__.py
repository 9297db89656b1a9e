"""ADMS push server package.

This package is organized by feature modules (punches, attendance, devices, ...)
with a thin Flask controller layer over service/repository layers.
"""
