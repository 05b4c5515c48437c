"""
splunkacs: Declarative management of Splunk Cloud resources through the
Admin Config Service (ACS), with convergence polling for eventually
consistent writes.
"""

__version__ = "0.1.0"
