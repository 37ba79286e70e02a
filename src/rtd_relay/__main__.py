from rtd_relay.server import main

main()
