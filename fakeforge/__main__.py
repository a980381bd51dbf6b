from fakeforge.cli import main

main()
