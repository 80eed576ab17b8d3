from coldreach.server import main

main()
