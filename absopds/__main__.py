from absopds.cli import main

main()
