from emojimash.server import main

main()
