from erbgen.cli import main

main()
