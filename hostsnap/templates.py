"""Configuration file template written by ``hostsnap init``."""

CONFIG_TEMPLATE = """# hostsnap Configuration File
# Location: hostsnap.yaml (or set HOSTSNAP_CONFIG environment variable)

# Optional: variables referenced below as ${name}
# vars:
#   tools_dir: /opt/tools

defaults:
  # External tools (command lines may carry arguments; only the executable is probed)
  python_cmd: ""                 # Interpreter command; empty probes python3, python, py on PATH
  seven_zip_cmd: 7z              # 7-Zip command (e.g., 7z, 7zz, /usr/local/bin/7z)
  unrar_cmd: unrar               # UnRAR command
  command_timeout: 5             # Seconds allowed per tool or platform command

  # Network identity
  network_enabled: true          # Ask the diagnostic endpoint for the public IP address
  network_host: ip.nzbget.com    # Endpoint echoing the caller's address over HTTPS
  network_port: 443
  network_timeout: 5             # Seconds allowed per socket operation
  network_ttl: 7200              # Seconds a resolved address is reused
  stale_if_error: false          # Reuse the last resolved address of any age when a refresh fails

  # Collect platform, tools and network concurrently
  parallel: false
"""
