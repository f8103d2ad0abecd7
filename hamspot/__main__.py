from hamspot.main import main

main()
