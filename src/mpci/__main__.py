from mpci.cli.app import main

main()
