from drive_relay.main import run

run()
