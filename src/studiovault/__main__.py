from studiovault.main import main

main()
