from fleetrel.cli.app import main

main()
