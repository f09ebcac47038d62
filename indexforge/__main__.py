from indexforge.cli import main

main()
