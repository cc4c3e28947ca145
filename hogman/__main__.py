from hogman.main import main

main()
