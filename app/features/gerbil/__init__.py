"""
Exit node ("gerbil") feature module.

Builds the WireGuard interface configuration an exit node applies: its own
key, port and address, plus one peer per attached site.
"""
